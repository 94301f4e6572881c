from livescore.generators.squad_generator import SquadGenerator, DEMO_TEAMS

__all__ = ["SquadGenerator", "DEMO_TEAMS"]
