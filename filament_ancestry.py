"""
Ancestry of filaments, as an index based union-find.

The arena owns every filament of one sheet run. Absorbed filaments stay in
the arena for traceability, they are simply no longer representatives.
The true parent lineage is never rewritten; path compression only updates a
separate shortcut table.
"""

import logging

from filament_errors import PreconditionError, SelfIncludeError

logger = logging.getLogger('Filaments.ancestry')


class FilamentArena:
    """Table of filaments addressed by stable integer ids"""

    def __init__(self, compress=True):
        self.compress = compress
        self._filaments = []
        self._parents = []     # id of absorbing filament, or None
        self._shortcuts = []   # closest known ancestor, for find()

    def register(self, filament):
        """Store a new filament and report its id"""
        filament_id = len(self._filaments)
        self._filaments.append(filament)
        self._parents.append(None)
        self._shortcuts.append(filament_id)
        return filament_id

    def __getitem__(self, filament_id):
        return self._filaments[filament_id]

    def __len__(self):
        return len(self._filaments)

    def __iter__(self):
        return iter(self._filaments)

    def parent_of(self, filament_id):
        """Report the id of the filament which directly absorbed this one, if any"""
        return self._parents[filament_id]

    def is_representative(self, filament_id):
        return self._parents[filament_id] is None

    def find(self, filament_id):
        """Report the id of the representative of the provided filament.

        Args:
            filament_id (int): Any filament id

        Returns:
            int: Id of the living ancestor (the filament itself if alive)
        """
        root = filament_id
        while self._shortcuts[root] != root:
            root = self._shortcuts[root]

        if self.compress:
            current = filament_id
            while current != root:
                next_id = self._shortcuts[current]
                self._shortcuts[current] = root
                current = next_id

        return root

    def link(self, child_id, parent_id):
        """Record that child filament is absorbed by parent filament.

        Args:
            child_id (int): Id of the absorbed filament, must be alive
            parent_id (int): Id of the absorbing filament, must be alive
        """
        if child_id == parent_id:
            raise SelfIncludeError(child_id)
        if self._parents[child_id] is not None:
            raise PreconditionError(
                f"Filament #{child_id} already absorbed by #{self._parents[child_id]}")
        if self._parents[parent_id] is not None:
            raise PreconditionError(
                f"Filament #{parent_id} is absorbed by #{self._parents[parent_id]}, cannot absorb")

        self._parents[child_id] = parent_id
        self._shortcuts[child_id] = parent_id
        logger.debug(f"Filament #{child_id} absorbed by #{parent_id}")

    def lineage(self, filament_id):
        """Report the chain of ids from the provided filament up to its representative"""
        chain = [filament_id]
        current = self._parents[filament_id]
        while current is not None:
            chain.append(current)
            current = self._parents[current]
        return chain

    def absorbed(self, filament_id):
        """Report the ids of the filaments directly absorbed by the provided one"""
        return [i for i, parent in enumerate(self._parents) if parent == filament_id]

    def representatives(self):
        """Report the living filaments, in creation order"""
        return [f for f, parent in zip(self._filaments, self._parents) if parent is None]
