"""Staff roster operations: listing, adding, renaming, removing, provisioning."""

from __future__ import annotations

import logging

from board.repositories import BACKEND_ERRORS, StaffRepository, TaskRepository
from board.results import Ok, Err, backend_error, not_found, validation_error

logger = logging.getLogger("board.roster")

MSG_NAME_REQUIRED = "スタッフ名を入力してください"
MSG_NAME_TAKEN = "同じ名前のスタッフが既に登録されています"
MSG_STAFF_NOT_FOUND = "スタッフが見つかりません"


def _is_duplicate(kept: list[dict], member: dict) -> bool:
    return any(
        k["name"] == member["name"] or (k.get("email") and member.get("email") and k["email"] == member["email"])
        for k in kept
    )


def dedupe(members: list[dict]) -> tuple[list[dict], list[dict]]:
    """Split members into (unique, duplicates); the earliest of a name or email wins."""
    unique: list[dict] = []
    duplicates: list[dict] = []
    for m in members:
        (duplicates if _is_duplicate(unique, m) else unique).append(m)
    return unique, duplicates


def list_staff(repo: StaffRepository) -> Ok | Err:
    try:
        members = repo.list_active()
    except BACKEND_ERRORS as exc:
        logger.error("Failed to list staff: %s", exc)
        return backend_error(str(exc))
    return Ok(dedupe(members)[0])


def add_staff(
    repo: StaffRepository, name: str, email: str | None = None, user_id: str | None = None,
) -> Ok | Err:
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        return validation_error(MSG_NAME_REQUIRED)
    try:
        if any(m["name"] == name for m in repo.list_active()):
            return validation_error(MSG_NAME_TAKEN)
        member = repo.add(name, email=email, user_id=user_id)
    except BACKEND_ERRORS as exc:
        logger.error("Failed to add staff %s: %s", name, exc)
        return backend_error(str(exc))
    logger.info("Added staff %s (%s)", name, member["id"])
    return Ok(member)


def rename_staff(repo: StaffRepository, staff_id: str, name: str) -> Ok | Err:
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        return validation_error(MSG_NAME_REQUIRED)
    try:
        if any(m["name"] == name and m["id"] != staff_id for m in repo.list_active()):
            return validation_error(MSG_NAME_TAKEN)
        member = repo.rename(staff_id, name)
    except BACKEND_ERRORS as exc:
        logger.error("Failed to rename staff %s: %s", staff_id, exc)
        return backend_error(str(exc))
    if member is None:
        return not_found(MSG_STAFF_NOT_FOUND)
    return Ok(member)


def delete_staff(staff_repo: StaffRepository, tasks_repo: TaskRepository, staff_id: str) -> Ok | Err:
    """Deactivate a member and drop every task filed under their name.

    Returns the deactivated member. A failure while deleting the tasks is
    logged and does not undo the deactivation.
    """
    try:
        member = staff_repo.get(staff_id)
        if member is None or not member.get("is_active", True):
            return not_found(MSG_STAFF_NOT_FOUND)
        staff_repo.deactivate(staff_id)
    except BACKEND_ERRORS as exc:
        logger.error("Failed to deactivate staff %s: %s", staff_id, exc)
        return backend_error(str(exc))

    try:
        tasks_repo.delete_by_staff(member["name"])
    except BACKEND_ERRORS as exc:
        logger.warning("Failed to delete tasks for staff %s: %s", member["name"], exc)

    logger.info("Removed staff %s", member["name"])
    return Ok({**member, "is_active": False})


def provision_staff(repo: StaffRepository, identity) -> Ok | Err:
    """Register the signed-in identity as a staff member if not already listed.

    Returns ``Ok((member, created))``.
    """
    name = identity.display_name
    if not name:
        return validation_error(MSG_NAME_REQUIRED)
    try:
        existing = next((m for m in repo.list_active() if m["name"] == name), None)
        if existing:
            return Ok((existing, False))
        member = repo.add(name, email=identity.email or None, user_id=identity.user_id)
    except BACKEND_ERRORS as exc:
        logger.error("Failed to provision staff %s: %s", name, exc)
        return backend_error(str(exc))
    logger.info("Provisioned %s as staff", name)
    return Ok((member, True))


def cleanup_duplicates(repo: StaffRepository) -> Ok | Err:
    """Deactivate duplicate active members, keeping the earliest of each."""
    try:
        unique, duplicates = dedupe(repo.list_active())
        if duplicates:
            repo.deactivate_many([d["id"] for d in duplicates])
    except BACKEND_ERRORS as exc:
        logger.error("Staff cleanup failed: %s", exc)
        return backend_error(str(exc))
    if duplicates:
        logger.info("Deactivated %d duplicate staff row(s)", len(duplicates))
    return Ok({
        "removed_duplicates": len(duplicates),
        "remaining_staff": len(unique),
        "staff": unique,
    })
