import pytest
import requests

from sudoku.config import ServiceConfig
from sudoku.errors import MalformedBoard, ServiceError, TransportError, Unsolvable
from sudoku.services.board_service import BoardServiceClient

from tests.helpers import SOLVED_4, StubHttpSession, StubResponse, make_board


def client_with(*responses, error=None, base_url="http://solver.test/", timeout=None):
    session = StubHttpSession(*responses, error=error)
    client = BoardServiceClient(base_url, timeout=timeout, session=session)
    return client, session


def test_generate_posts_size_and_clues():
    board = make_board(4, fixed=[0, 5, 10, 15])
    client, session = client_with(StubResponse(200, board.to_payload()), timeout=5.0)

    result = client.generate(4, 4)

    assert result == board
    assert session.calls == [
        {"url": "http://solver.test/generate", "json": {"size": 4, "clues": 4}, "timeout": 5.0}
    ]


def test_generate_non_success_status_raises_service_error():
    client, _ = client_with(StubResponse(500))
    with pytest.raises(ServiceError) as excinfo:
        client.generate(9, 30)
    assert excinfo.value.status == 500
    assert str(excinfo.value) == "HTTP error! status: 500"


def test_generate_400_is_a_plain_service_error():
    client, _ = client_with(StubResponse(400))
    with pytest.raises(ServiceError) as excinfo:
        client.generate(9, 30)
    assert not isinstance(excinfo.value, Unsolvable)


def test_solve_posts_board_payload():
    board = make_board(4, fixed=[0, 5])
    solved = {"size": 4, "cells": list(SOLVED_4), "fixed_cells": [[0, 1], [5, 4]]}
    client, session = client_with(StubResponse(200, solved))

    result = client.solve(board)

    assert result.is_complete
    assert result.fixed_cells == board.fixed_cells
    assert session.calls[0]["url"] == "http://solver.test/solve"
    assert session.calls[0]["json"] == board.to_payload()


def test_solve_400_means_unsolvable():
    client, _ = client_with(StubResponse(400))
    with pytest.raises(Unsolvable) as excinfo:
        client.solve(make_board(4, fixed=[0]))
    assert excinfo.value.status == 400
    assert str(excinfo.value) == "No solution found for this board"


def test_solve_other_failure_is_service_error():
    client, _ = client_with(StubResponse(502))
    with pytest.raises(ServiceError) as excinfo:
        client.solve(make_board(4, fixed=[0]))
    assert not isinstance(excinfo.value, Unsolvable)


def test_solve_rejects_board_of_different_size():
    other = make_board(9, fixed=[0])
    client, _ = client_with(StubResponse(200, other.to_payload()))
    with pytest.raises(MalformedBoard):
        client.solve(make_board(4, fixed=[0]))


def test_generate_rejects_board_of_different_size():
    small = make_board(4, fixed=[0, 5, 10, 15])
    client, _ = client_with(StubResponse(200, small.to_payload()))
    with pytest.raises(MalformedBoard):
        client.generate(9, 30)


def test_solve_rejects_board_that_drops_givens():
    puzzle = make_board(4, fixed=[0, 5, 10, 15])
    solved = {"size": 4, "cells": list(SOLVED_4), "fixed_cells": []}
    client, _ = client_with(StubResponse(200, solved))
    with pytest.raises(MalformedBoard):
        client.solve(puzzle)


def test_solve_rejects_incomplete_board():
    puzzle = make_board(4, fixed=[0, 5])
    partial = make_board(4, fixed=[0, 5], filled=[1, 2, 3])
    client, _ = client_with(StubResponse(200, partial.to_payload()))
    with pytest.raises(MalformedBoard):
        client.solve(puzzle)


def test_unsolvable_is_not_a_generic_service_error():
    client, _ = client_with(StubResponse(400))
    with pytest.raises(Unsolvable):
        try:
            client.solve(make_board(4, fixed=[0]))
        except ServiceError:
            pytest.fail("unsolvable reported as a generic service error")


def test_invalid_json_is_malformed():
    client, _ = client_with(StubResponse(200, invalid_json=True))
    with pytest.raises(MalformedBoard):
        client.generate(4, 4)


def test_payload_violating_invariants_is_malformed():
    body = {"size": 4, "cells": [0] * 16, "fixed_cells": [[0, 3]]}
    client, _ = client_with(StubResponse(200, body))
    with pytest.raises(MalformedBoard):
        client.generate(4, 4)


@pytest.mark.parametrize(
    "error",
    [
        requests.ConnectionError("refused"),
        requests.Timeout("slow"),
        requests.RequestException("boom"),
    ],
)
def test_transport_failures_are_wrapped(error):
    client, _ = client_with(error=error)
    with pytest.raises(TransportError) as excinfo:
        client.generate(4, 4)
    assert excinfo.value.__cause__ is error


def test_from_config_and_close():
    session = StubHttpSession()
    config = ServiceConfig(base_url="http://example.test:8080", timeout=2.5)
    with BoardServiceClient.from_config(config, session=session) as client:
        assert client.base_url == "http://example.test:8080"
        assert client.timeout == 2.5
    assert session.closed
