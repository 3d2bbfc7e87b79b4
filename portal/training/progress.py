"""
Suivi de la progression de visionnage d'une vidéo (une session de lecture).

Une `PlaybackSession` observe les événements natifs du lecteur (`play`,
`timeupdate`, `pause`, `ended`) et en déduit:
- les paliers franchis (`started`, `50%`, `75%`, `completed`), chacun signalé
  au plus une fois par session;
- une estimation du temps réellement regardé, sauts exclus: un écart de
  position supérieur à SEEK_THRESHOLD_SECONDS est considéré comme un saut;
- une synchronisation `duration_update` à chaque pause, non dédupliquée.

États: idle → playing ⇄ paused → completed (terminal).

Chaque transition renvoie la liste des `MilestoneEvent` émis. Si un callable
`report` est fourni, il est appelé pour chaque événement; ses exceptions sont
journalisées et avalées, le signalement ne doit jamais gêner la lecture.

L'état est sérialisable (`to_dict` / `from_dict`) pour être conservé dans le
cache Django entre deux lots d'événements d'un même onglet.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

STARTED = 'started'
HALF = '50%'
THREE_QUARTERS = '75%'
COMPLETED = 'completed'
DURATION_UPDATE = 'duration_update'

MILESTONES = (STARTED, HALF, THREE_QUARTERS, COMPLETED, DURATION_UPDATE)

# Au-delà de cet écart entre deux timeupdate, la position a été déplacée à la main
SEEK_THRESHOLD_SECONDS = 2.0

# (pourcentage entier minimal, palier)
PERCENT_MILESTONES = ((50, HALF), (75, THREE_QUARTERS))

IDLE = 'idle'
PLAYING = 'playing'
PAUSED = 'paused'
ENDED = 'completed'

PLAYER_EVENTS = ('play', 'timeupdate', 'pause', 'ended')


@dataclass(frozen=True)
class MilestoneEvent:
    """Événement sortant vers le suivi d'engagement."""
    email: str
    milestone: str
    percentage: Optional[int] = None
    watched_seconds: Optional[float] = None

    def as_payload(self) -> dict:
        """Même forme que le corps attendu par `/api/hubspot-track/`."""
        payload = {'email': self.email, 'milestone': self.milestone}
        if self.percentage is not None:
            payload['percentage'] = self.percentage
        if self.watched_seconds is not None:
            payload['watchedSeconds'] = self.watched_seconds
        return payload


def _is_usable_duration(duration) -> bool:
    return duration is not None and math.isfinite(duration) and duration > 0


class PlaybackSession:

    def __init__(self, email: str, report: Optional[Callable[[MilestoneEvent], None]] = None) -> None:
        self.email = email
        self.state = IDLE
        self.tracked_milestones = set()
        self.accumulated_watch_seconds = 0.0
        self.last_observed_timestamp: Optional[float] = None
        self._report = report

    # ------------------------------------------------------------------
    # Événements du lecteur
    # ------------------------------------------------------------------
    def play(self, current_time: Optional[float] = None) -> List[MilestoneEvent]:
        if self.state == ENDED:
            return []
        self.state = PLAYING
        self.last_observed_timestamp = float(current_time) if current_time is not None else None
        return self._emit_once(STARTED)

    def timeupdate(self, current_time: float, duration: Optional[float] = None) -> List[MilestoneEvent]:
        if self.state == ENDED:
            return []
        current_time = float(current_time)
        if not math.isfinite(current_time):
            return []

        # En pause (déplacement manuel de la tête de lecture), rien n'est compté
        if self.state == PLAYING:
            if self.last_observed_timestamp is not None:
                delta = current_time - self.last_observed_timestamp
                if 0 < delta <= SEEK_THRESHOLD_SECONDS:
                    self.accumulated_watch_seconds += delta
            self.last_observed_timestamp = current_time

        if not _is_usable_duration(duration):
            return []

        percent_watched = math.floor(current_time / duration * 100)
        emitted = []
        for threshold, milestone in PERCENT_MILESTONES:
            if percent_watched >= threshold:
                emitted += self._emit_once(milestone, percentage=threshold,
                                           watched_seconds=self.accumulated_watch_seconds)
        return emitted

    def pause(self) -> List[MilestoneEvent]:
        if self.state != PLAYING:
            return []
        self.state = PAUSED
        # Le temps passé en pause ne doit pas compter à la reprise
        self.last_observed_timestamp = None
        if self.accumulated_watch_seconds > 0:
            return [self._emit(MilestoneEvent(self.email, DURATION_UPDATE,
                                              watched_seconds=self.accumulated_watch_seconds))]
        return []

    def ended(self) -> List[MilestoneEvent]:
        if self.state not in (PLAYING, PAUSED):
            return []
        self.state = ENDED
        self.last_observed_timestamp = None
        return self._emit_once(COMPLETED, percentage=100, watched_seconds=self.accumulated_watch_seconds)

    def handle(self, event_type: str, current_time: Optional[float] = None,
               duration: Optional[float] = None) -> List[MilestoneEvent]:
        """Aiguille un événement brut du lecteur vers la transition correspondante."""
        if event_type == 'play':
            return self.play(current_time)
        if event_type == 'timeupdate':
            if current_time is None:
                return []
            return self.timeupdate(current_time, duration)
        if event_type == 'pause':
            return self.pause()
        if event_type == 'ended':
            return self.ended()
        raise ValueError(f"Unknown player event: {event_type}")

    # ------------------------------------------------------------------
    # Émission
    # ------------------------------------------------------------------
    def _emit_once(self, milestone: str, percentage: Optional[int] = None,
                   watched_seconds: Optional[float] = None) -> List[MilestoneEvent]:
        if milestone in self.tracked_milestones:
            return []
        self.tracked_milestones.add(milestone)
        return [self._emit(MilestoneEvent(self.email, milestone, percentage, watched_seconds))]

    def _emit(self, event: MilestoneEvent) -> MilestoneEvent:
        if self._report is not None:
            try:
                self._report(event)
            except Exception as exc:
                logger.warning(f"Signalement du palier {event.milestone} abandonné: {exc}")
        return event

    # ------------------------------------------------------------------
    # Persistance (cache)
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            'email': self.email,
            'state': self.state,
            'tracked': sorted(self.tracked_milestones),
            'accumulated': self.accumulated_watch_seconds,
            'last_observed': self.last_observed_timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict, report: Optional[Callable[[MilestoneEvent], None]] = None) -> 'PlaybackSession':
        session = cls(data['email'], report=report)
        session.state = data.get('state', IDLE)
        session.tracked_milestones = set(data.get('tracked', ()))
        session.accumulated_watch_seconds = float(data.get('accumulated', 0.0))
        session.last_observed_timestamp = data.get('last_observed')
        return session
