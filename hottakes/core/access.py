"""
Board visibility and sharing settings.

Everything here is a pure function of its arguments: no I/O, no lookups.
The caller supplies the viewer's friend ids from the identity service.
"""
import base64
import re
import secrets
from typing import Iterable, List, Sequence

from hottakes.schemas.sharing import CloudBoard, SharingPolicy, SharingUpdate, Visibility

PUBLIC_LINK_BYTES = 12


def can_user_view_board(board: CloudBoard, viewer_id: str, viewer_friend_ids: Iterable[str]) -> bool:
    if board.owner_id == viewer_id:
        return True

    visibility = board.sharing.visibility
    if visibility == Visibility.PUBLIC:
        return True
    if visibility == Visibility.FRIENDS:
        return board.owner_id in set(viewer_friend_ids)
    if visibility == Visibility.SPECIFIC:
        return viewer_id in board.sharing.allowed_friends
    return False


def filter_visible_boards(
    boards: Sequence[CloudBoard],
    viewer_id: str,
    viewer_friend_ids: Iterable[str],
) -> List[CloudBoard]:
    friend_ids = set(viewer_friend_ids)
    return [board for board in boards if can_user_view_board(board, viewer_id, friend_ids)]


def get_shared_board_count_by_friend(
    boards: Sequence[CloudBoard],
    friend_id: str,
    viewer_id: str,
    viewer_friend_ids: Iterable[str],
) -> int:
    """Number of ``friend_id``'s boards the viewer is allowed to see."""
    friend_ids = set(viewer_friend_ids)
    return sum(
        1
        for board in boards
        if board.owner_id == friend_id and can_user_view_board(board, viewer_id, friend_ids)
    )


def generate_public_link_id() -> str:
    """Random alphanumeric token for a board's public link."""
    encoded = base64.b64encode(secrets.token_bytes(PUBLIC_LINK_BYTES)).decode("ascii")
    return re.sub(r"[^a-zA-Z0-9]", "", encoded)


def update_board_sharing(board: CloudBoard, **changes) -> CloudBoard:
    """Apply sharing changes; turning the public link on mints an id once."""
    update = SharingUpdate(**changes)
    sharing = SharingPolicy.model_validate(
        {**board.sharing.model_dump(), **update.model_dump(exclude_unset=True)}
    )
    if sharing.public_link_enabled and not sharing.public_link_id:
        sharing.public_link_id = generate_public_link_id()
    return board.model_copy(update={"sharing": sharing})


def revoke_public_link(board: CloudBoard) -> CloudBoard:
    """Replace the public link id so previously shared links stop working."""
    if not board.sharing.public_link_enabled:
        return board
    sharing = SharingPolicy.model_validate(
        {**board.sharing.model_dump(), "public_link_id": generate_public_link_id()}
    )
    return board.model_copy(update={"sharing": sharing})
