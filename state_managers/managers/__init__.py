from state_managers.managers.collection_state_manager import CollectionStateManager
from state_managers.managers.data_state_manager import DataStateManager, DataTest
from state_managers.managers.state_manager import StateManager

__all__ = ["CollectionStateManager", "DataStateManager", "DataTest", "StateManager"]
