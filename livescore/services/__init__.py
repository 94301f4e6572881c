from livescore.services.broadcast import Broadcaster, QueueListener, broadcaster
from livescore.services.locks import InningsLocks
from livescore.services.scoring import ScoringService, load_innings_state

__all__ = [
    "Broadcaster",
    "QueueListener",
    "broadcaster",
    "InningsLocks",
    "ScoringService",
    "load_innings_state",
]
