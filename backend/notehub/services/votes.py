"""Vote ledger: each user holds at most one vote per note.

Re-submitting the same choice withdraws the vote (toggle-off); submitting
the other choice switches it. The note's counters are kept equal to the
number of matching ``note_votes`` rows by updating both in the same
transaction while the note row is locked.
"""

import uuid
from typing import NamedTuple

from sqlalchemy.orm import Session

from notehub.models.note import Note
from notehub.models.vote import NoteVote
from notehub.services.errors import ForbiddenError, InvalidInputError, NotFoundError
from notehub.services.policy import can_read
from notehub.services.types import VoteChoice, VoteTally

VOTE_CHOICES: tuple[VoteChoice, ...] = ("upvote", "downvote")


class VoteStep(NamedTuple):
    """Outcome of one vote submission against the voter's current choice."""

    choice: VoteChoice | None  # voter's choice afterwards; None once withdrawn
    upvote_delta: int
    downvote_delta: int


def _delta(choice: VoteChoice, amount: int) -> tuple[int, int]:
    return (amount, 0) if choice == "upvote" else (0, amount)


def plan_vote(current: VoteChoice | None, choice: VoteChoice) -> VoteStep:
    """Return the transition for submitting *choice* when *current* is held."""
    if choice not in VOTE_CHOICES:
        raise InvalidInputError(f"Unknown vote choice: {choice!r}")
    if current is None:
        return VoteStep(choice, *_delta(choice, 1))
    if current == choice:
        return VoteStep(None, *_delta(choice, -1))
    up_new, down_new = _delta(choice, 1)
    up_old, down_old = _delta(current, -1)
    return VoteStep(choice, up_new + up_old, down_new + down_old)


def apply_counts(upvotes: int, downvotes: int, step: VoteStep) -> VoteTally:
    # Counters never go below zero.
    return VoteTally(
        upvotes=max(0, upvotes + step.upvote_delta),
        downvotes=max(0, downvotes + step.downvote_delta),
    )


class VoteService:
    def apply_vote(
        self, note_id: uuid.UUID, user_id: uuid.UUID, choice: VoteChoice, db: Session
    ) -> VoteTally:
        """Apply *choice* by *user_id* to the note and return the new tallies.

        Raises NotFoundError if the note is absent, ForbiddenError if the voter
        cannot read it, InvalidInputError for an unknown choice.
        """
        note = db.query(Note).filter(Note.id == note_id).with_for_update().first()
        if note is None:
            raise NotFoundError(f"Note {note_id} not found")
        if not can_read(note, user_id):
            raise ForbiddenError("This note is private")

        existing = (
            db.query(NoteVote)
            .filter(NoteVote.note_id == note_id, NoteVote.user_id == user_id)
            .first()
        )
        current = existing.choice if existing is not None else None
        step = plan_vote(current, choice)  # type: ignore[arg-type]

        if existing is None:
            db.add(NoteVote(note_id=note_id, user_id=user_id, choice=choice))
        elif step.choice is None:
            db.delete(existing)
        else:
            existing.choice = step.choice

        tally = apply_counts(note.upvote_count, note.downvote_count, step)
        note.upvote_count = tally["upvotes"]
        note.downvote_count = tally["downvotes"]
        db.commit()
        return tally

    def viewer_vote(
        self, note_id: uuid.UUID, user_id: uuid.UUID | None, db: Session
    ) -> VoteChoice | None:
        """Return *user_id*'s current choice on the note, if any."""
        if user_id is None:
            return None
        existing = (
            db.query(NoteVote)
            .filter(NoteVote.note_id == note_id, NoteVote.user_id == user_id)
            .first()
        )
        return existing.choice if existing is not None else None  # type: ignore[return-value]
