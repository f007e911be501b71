from regevo.database.json_population_storage import JsonPopulationStorage
from regevo.database.program_storage import PopulationStorage

__all__ = ["JsonPopulationStorage", "PopulationStorage"]
