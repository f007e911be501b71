from regevo.evolution.strategies.elite_selectors import EliteSelector, TopKEliteSelector

__all__ = ["EliteSelector", "TopKEliteSelector"]
