"""
Challenge Engine - One scripted challenge at a time.

States:
    Idle    no current_challenge_id
    Active  one challenge shown; blocks further selection

Each challenge is a tagged variant carrying its own threshold constants.
Two predicates per challenge:
- trigger: when to offer it (fires before the player would notice)
- goal: when it counts as completed

Completed challenges are never reselected. A challenge closed without
completion is acknowledged for the current turn and not reopened until
the turn advances.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Sequence, Union

from ..catalog import BuildingKind
from .state import GameState


class ChallengeId(str, Enum):
    ENERGY = "challenge1_energy"
    CLEAN_WATER = "challenge2_clean_water"
    HAPPINESS = "challenge3_happiness"
    WASTE_MANAGEMENT = "challenge4_waste_management"


@dataclass(frozen=True)
class ChallengeText:
    title: str
    description: str
    reward: str


@dataclass(frozen=True)
class EnergyChallenge:
    """Offered when the settlement grows on a thin energy margin."""
    text: ChallengeText
    trigger_min_buildings: int = 3
    trigger_max_energy: int = 5
    goal_min_energy: int = 10  # exclusive

    @property
    def challenge_id(self) -> ChallengeId:
        return ChallengeId.ENERGY


@dataclass(frozen=True)
class CleanWaterChallenge:
    """Offered when water degrades as the population grows."""
    text: ChallengeText
    trigger_max_water: int = 45
    trigger_min_population: int = 8
    goal_min_water: int = 70  # exclusive

    @property
    def challenge_id(self) -> ChallengeId:
        return ChallengeId.CLEAN_WATER


@dataclass(frozen=True)
class HappinessChallenge:
    """Offered when a housing-heavy settlement lacks social spaces."""
    text: ChallengeText
    trigger_max_happiness: int = 55
    trigger_min_houses: int = 3
    goal_min_happiness: int = 75  # exclusive

    @property
    def challenge_id(self) -> ChallengeId:
        return ChallengeId.HAPPINESS


@dataclass(frozen=True)
class WasteChallenge:
    """Offered once the settlement is large; completed by any recycling centre."""
    text: ChallengeText
    trigger_min_houses: int = 10

    @property
    def challenge_id(self) -> ChallengeId:
        return ChallengeId.WASTE_MANAGEMENT


Challenge = Union[EnergyChallenge, CleanWaterChallenge, HappinessChallenge, WasteChallenge]


# Declared order is selection priority
CHALLENGES: tuple[Challenge, ...] = (
    EnergyChallenge(ChallengeText(
        title="Energy for Everyone!",
        description=(
            "The community is growing and needs more energy. "
            "Consider building renewable energy sources."
        ),
        reward="New leisure-focused building options have been unlocked!",
    )),
    CleanWaterChallenge(ChallengeText(
        title="Clean Water, Healthy Life!",
        description=(
            "River water quality needs urgent attention as the population grows. "
            "A treatment plant is essential."
        ),
        reward=(
            "Aquatic biodiversity has increased! Small fish can be seen in the river "
            "and the water is clearer."
        ),
    )),
    HappinessChallenge(ChallengeText(
        title="Happy Community!",
        description=(
            "Community happiness is essential. "
            "Invest in spaces where everyone can meet and relax."
        ),
        reward="Vila Verde has become an example of well-being and social cohesion!",
    )),
    WasteChallenge(ChallengeText(
        title="Essential Waste Management!",
        description=(
            "Vila Verde is growing! To keep the village clean and healthy, "
            "it is crucial to build a Recycling Centre."
        ),
        reward="Recycling is in place! Air and water are cleaner and citizens more aware.",
    )),
)


class NotificationKind(Enum):
    TRIGGERED = "triggered"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ChallengeNotification:
    """
    Single-shot payload for a blocking user-facing alert.

    TRIGGERED carries the description and a reward preview;
    COMPLETED carries the reward text.
    """
    kind: NotificationKind
    challenge_id: str
    title: str
    text: str
    reward: str


# =============================================================================
# Predicates
# =============================================================================

def trigger_met(challenge: Challenge, state: GameState) -> bool:
    """Whether a challenge should be offered on this state."""
    ind = state.indicators
    if isinstance(challenge, EnergyChallenge):
        return (
            state.building_count >= challenge.trigger_min_buildings
            and ind.energy_balance <= challenge.trigger_max_energy
        )
    elif isinstance(challenge, CleanWaterChallenge):
        return (
            ind.water_quality <= challenge.trigger_max_water
            and ind.population >= challenge.trigger_min_population
            and not state.has_building(BuildingKind.WATER_TREATMENT)
        )
    elif isinstance(challenge, HappinessChallenge):
        return (
            ind.community_happiness <= challenge.trigger_max_happiness
            and state.house_count >= challenge.trigger_min_houses
            and not state.has_building(BuildingKind.COMMUNITY_CENTER)
        )
    elif isinstance(challenge, WasteChallenge):
        return (
            state.house_count >= challenge.trigger_min_houses
            and not state.has_building(BuildingKind.WASTE_COLLECTION)
        )
    return False


def goal_met(challenge: Challenge, state: GameState) -> bool:
    """Whether a challenge's goal holds on this state."""
    ind = state.indicators
    if isinstance(challenge, EnergyChallenge):
        return ind.energy_balance > challenge.goal_min_energy
    elif isinstance(challenge, CleanWaterChallenge):
        return (
            ind.water_quality > challenge.goal_min_water
            and state.has_building(BuildingKind.WATER_TREATMENT)
        )
    elif isinstance(challenge, HappinessChallenge):
        return (
            ind.community_happiness > challenge.goal_min_happiness
            and state.has_building(BuildingKind.COMMUNITY_CENTER)
        )
    elif isinstance(challenge, WasteChallenge):
        return state.has_building(BuildingKind.WASTE_COLLECTION)
    return False


def get_challenge(
    challenge_id: str | None,
    challenges: Sequence[Challenge] = CHALLENGES,
) -> Challenge | None:
    if isinstance(challenge_id, ChallengeId):
        challenge_id = challenge_id.value
    for challenge in challenges:
        if challenge.challenge_id.value == challenge_id:
            return challenge
    return None


# =============================================================================
# Transitions
# =============================================================================

def select_challenge(
    state: GameState,
    challenges: Sequence[Challenge] = CHALLENGES,
    overlay_open: bool = False,
) -> tuple[GameState, list[ChallengeNotification]]:
    """
    Idle -> Active for the first eligible challenge in declared order.

    No-op while a challenge is Active or a blocking overlay is open.
    """
    if state.has_active_challenge or overlay_open:
        return state, []

    for challenge in challenges:
        cid = challenge.challenge_id.value
        if cid in state.completed_challenge_ids or cid == state.acknowledged_challenge_id:
            continue
        if trigger_met(challenge, state):
            notification = ChallengeNotification(
                kind=NotificationKind.TRIGGERED,
                challenge_id=cid,
                title=challenge.text.title,
                text=challenge.text.description,
                reward=challenge.text.reward,
            )
            return replace(state, current_challenge_id=cid), [notification]

    return state, []


def check_completion(
    state: GameState,
    challenges: Sequence[Challenge] = CHALLENGES,
) -> tuple[GameState, list[ChallengeNotification]]:
    """
    Active -> Idle when the active challenge's goal holds.

    The challenge joins completed_challenge_ids and is acknowledged for
    the turn so it cannot immediately re-trigger.
    """
    challenge = get_challenge(state.current_challenge_id, challenges)
    if challenge is None:
        return state, []

    cid = challenge.challenge_id.value
    if cid in state.completed_challenge_ids or not goal_met(challenge, state):
        return state, []

    notification = ChallengeNotification(
        kind=NotificationKind.COMPLETED,
        challenge_id=cid,
        title=challenge.text.title,
        text=challenge.text.reward,
        reward=challenge.text.reward,
    )
    new_state = replace(
        state,
        current_challenge_id=None,
        completed_challenge_ids=state.completed_challenge_ids | {cid},
        acknowledged_challenge_id=cid,
    )
    return new_state, [notification]


def close_challenge(state: GameState) -> GameState:
    """Active -> Idle without completion; acknowledged until the turn advances."""
    if not state.has_active_challenge:
        return state
    return replace(
        state,
        acknowledged_challenge_id=state.current_challenge_id,
        current_challenge_id=None,
    )
