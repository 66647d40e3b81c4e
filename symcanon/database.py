"""In-memory databases of canonical supercells and configurations.

A database stores deduplicated objects under a key. Objects are expected to
be inserted in canonical form, so that symmetrically equivalent objects share
a key. Storage is kept in memory, commit marks the current contents as
committed without writing anything to disk.

The databases are not thread safe. In particular the canonical supercell
cache of SupercellDatabase is mutated on first resolution of a supercell, so
callers sharing a database between threads must serialize access to it.
"""

__author__ = "Luis Barroso-Luque"

import logging
from abc import ABC, abstractmethod
from collections import defaultdict, namedtuple

from symcanon.structure.configuration import Configuration
from symcanon.structure.supercell import Supercell
from symcanon.symmetry.compare import ConfigurationCompare

logger = logging.getLogger(__name__)

# result of inserting a configuration: the primitive canonical configuration,
# whether it was new, and the same for the non-primitive canonical form
ConfigInsertResult = namedtuple(
    "ConfigInsertResult",
    ["primitive", "inserted_primitive", "canonical", "inserted_canonical"],
)


class Database(ABC):
    """Abstract database of deduplicated objects.

    Implementations must provide a key for each object, lookup by key,
    insertion that does not duplicate keys, and commit.
    """

    @abstractmethod
    def key(self, obj):
        """Get the key identifying an object in the database."""

    @abstractmethod
    def find(self, key):
        """Get the object stored under a key, None if not present."""

    @abstractmethod
    def insert(self, obj):
        """Insert an object if its key is not present.

        Returns:
            tuple: the stored object and a bool, True if it was inserted
        """

    @abstractmethod
    def commit(self):
        """Commit the current contents."""

    @abstractmethod
    def __len__(self):
        """Get number of stored objects."""

    @abstractmethod
    def __iter__(self):
        """Iterate over stored objects in insertion order."""

    def __contains__(self, obj):
        """Check if an object with the same key is stored."""
        return self.find(self.key(obj)) is not None


class MemoryDatabase(Database):
    """A Database keeping objects in a dict, in insertion order.

    Subclasses define the object key.
    """

    def __init__(self):
        """Initialize an empty MemoryDatabase."""
        self._objects = {}
        self._committed = {}

    def find(self, key):
        """Get the object stored under a key, None if not present."""
        return self._objects.get(key)

    def insert(self, obj):
        """Insert an object if its key is not present.

        Args:
            obj:
                object to insert.

        Returns:
            tuple: the stored object and a bool, True if it was inserted
        """
        key = self.key(obj)
        stored = self._objects.get(key)
        if stored is not None:
            return stored, False
        self._objects[key] = obj
        return obj, True

    def commit(self):
        """Mark the current contents as committed."""
        logger.info(
            "Committing %i objects to %s (%i new).",
            len(self._objects),
            self.__class__.__name__,
            len(self._objects) - len(self._committed),
        )
        self._committed = dict(self._objects)

    @property
    def committed(self):
        """Get the objects stored at the last commit."""
        return list(self._committed.values())

    @property
    def is_dirty(self):
        """Check if the contents changed since the last commit."""
        return self._objects.keys() != self._committed.keys()

    def __len__(self):
        """Get number of stored objects."""
        return len(self._objects)

    def __iter__(self):
        """Iterate over stored objects in insertion order."""
        return iter(self._objects.values())

    def __repr__(self):
        """Get database summary."""
        return f"{self.__class__.__name__}(size={len(self)})"


class SupercellDatabase(MemoryDatabase):
    """Database of canonical supercells keyed by name.

    Besides plain insertion, supercells can be resolved to the unique stored
    instance of their canonical form with resolve_canonical. Resolutions are
    cached by object identity, so resolving the same supercell object again
    does not repeat the canonical form search.
    """

    def __init__(self):
        """Initialize an empty SupercellDatabase."""
        super().__init__()
        self._canonical_cache = {}

    def key(self, supercell):
        """Get the supercell name."""
        return supercell.name

    def resolve_canonical(self, supercell, cache=True):
        """Find or insert the canonical form of a supercell.

        Args:
            supercell (Supercell):
                any supercell, canonical or not.
            cache (bool): optional
                if False the resolution is neither looked up nor stored in the
                cache. Use it for short lived supercells, since the cache keeps
                a reference to every supercell it stores.

        Returns:
            Supercell: the stored canonical supercell
        """
        cached = self._canonical_cache.get(id(supercell)) if cache else None
        if cached is not None and cached[0] is supercell:
            logger.debug("Canonical supercell of %s found in cache.", supercell.name)
            return cached[1]

        stored, inserted = self.insert(supercell.canonical_form())
        if inserted:
            logger.debug("Inserted canonical supercell %s.", stored.name)
        if cache:
            # keep a reference to the key object so its id is not reused
            self._canonical_cache[id(supercell)] = (supercell, stored)
        return stored

    def clear_cache(self):
        """Clear the canonical supercell cache.

        The cache holds a reference to every supercell resolved with caching,
        so it grows with the number of distinct supercell objects resolved.
        """
        self._canonical_cache.clear()


class ConfigurationDatabase(MemoryDatabase):
    """Database of canonical configurations keyed by name.

    Names of configurations with displacements depend on rounding, so two
    configurations equal within tolerance may still get different names.
    Before inserting under a new name, the stored configurations with the
    same supercell and occupation are checked with a ConfigurationCompare.
    """

    def __init__(self, sym_compare=None):
        """Initialize an empty ConfigurationDatabase.

        Args:
            sym_compare (ConfigurationCompare): optional
                comparator used to find stored configurations equal within
                tolerance. Defaults to a ConfigurationCompare with SITE_TOL.
        """
        super().__init__()
        if sym_compare is None:
            sym_compare = ConfigurationCompare()
        self.sym_compare = sym_compare
        self._by_occupation = defaultdict(list)

    def key(self, configuration):
        """Get the configuration name."""
        return configuration.name

    @staticmethod
    def _occupation_key(configuration):
        return configuration.supercell.name, configuration.occupation.tobytes()

    def find_equal(self, configuration):
        """Get the stored configuration equal to the given one, None if not present.

        Args:
            configuration (Configuration):
                configuration to look up, in canonical form.

        Returns:
            Configuration
        """
        stored = self.find(self.key(configuration))
        if stored is not None:
            return stored
        candidates = self._by_occupation.get(self._occupation_key(configuration), [])
        for candidate in candidates:
            if self.sym_compare.equal(candidate, configuration):
                return candidate
        return None

    def insert(self, configuration):
        """Insert a configuration if no equal configuration is stored.

        Returns:
            tuple: the stored configuration and a bool, True if it was inserted
        """
        stored = self.find_equal(configuration)
        if stored is not None:
            return stored, False
        stored, inserted = super().insert(configuration)
        self._by_occupation[self._occupation_key(configuration)].append(stored)
        return stored, inserted

    def __contains__(self, configuration):
        """Check if an equal configuration is stored."""
        return self.find_equal(configuration) is not None

    def supercell_configurations(self, supercell):
        """Get the stored configurations of a supercell.

        Args:
            supercell (Supercell or str):
                supercell or supercell name.

        Returns:
            list of Configuration
        """
        name = supercell if isinstance(supercell, str) else supercell.name
        return [config for config in self if config.supercell.name == name]


def _insert_canonical_configuration(
    configuration, supercell_db, config_db, cache=True
):
    """Insert a configuration in canonical form in the canonical supercell."""
    supercell = supercell_db.resolve_canonical(configuration.supercell, cache=cache)
    op = configuration.supercell.to_canonical()
    canonical = configuration.fill_supercell(supercell, op).canonical_form()
    return config_db.insert(canonical)


def make_canonical_and_insert(obj, supercell_db, config_db=None, primitive_only=False):
    """Canonicalize a supercell or configuration and insert it in a database.

    A supercell is replaced by its canonical form and inserted in the
    supercell database.

    A configuration is first reduced to its primitive configuration, which is
    copied into its canonical supercell, put in canonical form and inserted
    in the configuration database. Unless primitive_only is set, the
    non-primitive configuration is also inserted in canonical form in the
    canonical equivalent of its own supercell.

    Args:
        obj (Supercell or Configuration):
            object to insert.
        supercell_db (SupercellDatabase):
            database of canonical supercells.
        config_db (ConfigurationDatabase): optional
            database of canonical configurations, required for configurations.
        primitive_only (bool): optional
            if True only insert the primitive configuration.

    Returns:
        tuple or ConfigInsertResult:
            for supercells the stored canonical supercell and whether it was
            inserted, for configurations a ConfigInsertResult. When only the
            primitive configuration is inserted the canonical fields are None
    """
    if isinstance(obj, Supercell):
        size = len(supercell_db)
        stored = supercell_db.resolve_canonical(obj)
        return stored, len(supercell_db) > size

    if not isinstance(obj, Configuration):
        raise TypeError(
            f"Can only insert Supercell or Configuration objects, got {type(obj)}."
        )
    if config_db is None:
        raise ValueError(
            "A configuration database is needed to insert configurations."
        )

    # primitive supercells are built anew for each non primitive configuration
    reduced = obj.primitive()
    primitive, inserted_primitive = _insert_canonical_configuration(
        reduced, supercell_db, config_db, cache=reduced is obj
    )
    if primitive_only:
        return ConfigInsertResult(primitive, inserted_primitive, None, None)

    if obj.is_primitive():
        return ConfigInsertResult(
            primitive, inserted_primitive, primitive, inserted_primitive
        )

    canonical, inserted_canonical = _insert_canonical_configuration(
        obj, supercell_db, config_db
    )
    return ConfigInsertResult(
        primitive, inserted_primitive, canonical, inserted_canonical
    )
