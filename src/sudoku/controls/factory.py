"""Factory helpers for creating the control column entities."""
from esper import World

from sudoku.constants import (
    ACTION_BUTTON_HEIGHT,
    CLUE_FIELD_HEIGHT,
    CONTROL_COLUMN_WIDTH,
    CONTROL_PADDING,
    SIZE_BUTTON_HEIGHT,
    SIZE_LABELS,
    SUPPORTED_SIZES,
)
from sudoku.controls.components import ClueField, ControlAction, ControlButton, ControlTag

TITLE_BAND = 96
ROW_GAP = 20


def clear_control_panel(world: World) -> None:
    """Remove every entity that belongs to the control column."""
    to_delete = {ent for ent, _ in world.get_component(ControlTag)}
    for ent in to_delete:
        world.delete_entity(ent, immediate=True)


def spawn_control_panel(world: World, height: int) -> None:
    """Create size preset buttons, the clue field and the generate/solve buttons.

    Positions are laid out top-down inside the left column of a window of
    ``height`` pixels.
    """
    clear_control_panel(world)
    inner_left = CONTROL_PADDING
    inner_width = CONTROL_COLUMN_WIDTH - 2 * CONTROL_PADDING
    gap = 8.0
    count = len(SUPPORTED_SIZES)
    size_width = (inner_width - gap * (count - 1)) / count

    y = height - TITLE_BAND - SIZE_BUTTON_HEIGHT / 2
    for position, size in enumerate(SUPPORTED_SIZES):
        center_x = inner_left + size_width / 2 + position * (size_width + gap)
        world.create_entity(
            ControlButton(
                label=SIZE_LABELS.get(size, str(size)),
                action=ControlAction.CHOOSE_SIZE,
                x=center_x,
                y=y,
                width=size_width,
                height=SIZE_BUTTON_HEIGHT,
                size=size,
                tooltip=f"{size}x{size} grid",
            ),
            ControlTag(),
        )

    y -= SIZE_BUTTON_HEIGHT / 2 + ROW_GAP + CLUE_FIELD_HEIGHT / 2 + 16
    world.create_entity(
        ClueField(
            x=inner_left + inner_width / 2,
            y=y,
            width=inner_width,
            height=CLUE_FIELD_HEIGHT,
        ),
        ControlTag(),
    )

    y -= CLUE_FIELD_HEIGHT / 2 + ROW_GAP + 24 + ACTION_BUTTON_HEIGHT / 2
    action_specs = (
        ("Generate New", ControlAction.GENERATE),
        ("Solve Current", ControlAction.SOLVE),
    )
    for label, action in action_specs:
        world.create_entity(
            ControlButton(
                label=label,
                action=action,
                x=inner_left + inner_width / 2,
                y=y,
                width=inner_width,
                height=ACTION_BUTTON_HEIGHT,
            ),
            ControlTag(),
        )
        y -= ACTION_BUTTON_HEIGHT + ROW_GAP / 2
