from __future__ import annotations
import structlog
from dailyguess.clock import Clock, utcnow
from dailyguess.errors import NoActiveChallenge, ParticipantNotApproved, ValidationError
from dailyguess.models.challenge import Challenge, Guess
from dailyguess.schemas.guess import GuessResult
from dailyguess.services.challenges import ChallengeStore
from dailyguess.services.registrations import RegistrationStore

log = structlog.get_logger()


def normalize(text: str) -> str:
    return (text or "").strip().casefold()

def is_correct(ch: Challenge, guess_text: str) -> bool:
    g = normalize(guess_text)
    return any(g == normalize(a) for a in ch.accepted_answers)


class GuessEngine:
    """
    One guess per participant per challenge. A repeat submission returns
    `already_submitted=True` and leaves the challenge untouched.
    """

    def __init__(self, challenges: ChallengeStore, registrations: RegistrationStore | None = None, *, clock: Clock = utcnow):
        self.challenges = challenges
        self.registrations = registrations
        self.clock = clock

    async def submit(self, participant_id: str, name: str, guess_text: str) -> GuessResult:
        participant_id, name = (participant_id or "").strip(), (name or "").strip()
        if not participant_id or not name or not (guess_text or "").strip():
            raise ValidationError("participant id, name and guess are required")
        if self.registrations is not None and not await self.registrations.is_approved(participant_id):
            raise ParticipantNotApproved(f"Participant {participant_id} is not approved")

        async with self.challenges.lock:
            ch = await self.challenges.current()
            if ch is None:
                raise NoActiveChallenge("No active challenge")
            if ch.guess_for(participant_id) is not None:
                log.info("guess_duplicate", challenge_id=ch.id, participant_id=participant_id)
                return GuessResult(is_correct=False, already_submitted=True)

            correct = is_correct(ch, guess_text)
            ch.guesses.append(Guess(
                participant_id=participant_id,
                participant_name=name,
                text=guess_text.strip(),
                timestamp=self.clock(),
                is_correct=correct,
            ))
            await self.challenges.save(ch)

        log.info("guess_submitted", challenge_id=ch.id, participant_id=participant_id, is_correct=correct)
        return GuessResult(is_correct=correct, already_submitted=False)
