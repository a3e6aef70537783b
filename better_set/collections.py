import functools
import types
from typing import (
    Any, Callable, Collection, Container, Dict, Generic, Hashable, Iterable, Iterator, List,
    Optional, Tuple, TypeVar,
)

__all__ = ['BetterSet', 'hybridmethod']

V = TypeVar('V', bound=Hashable)
R = TypeVar('R')

Predicate = Callable[[V], Any]

NOTSET = object()


class hybridmethod:
    """Method with a separate implementation when called on the class

    Accessed through an instance, the decorated function is bound to that
    instance as usual. Accessed through the class, the function registered
    with .classmethod() is bound to the class instead. Without a class-level
    implementation, the class access returns the plain function, so
    ``Klass.meth(obj, ...)`` behaves exactly like ``obj.meth(...)``.
    """

    def __init__(self, finstance: Callable, fclass: Optional[Callable] = None):
        self.finstance = finstance
        self.fclass = fclass
        functools.update_wrapper(self, finstance)

    def classmethod(self, fclass: Callable) -> 'hybridmethod':
        self.fclass = fclass
        return self

    def __get__(self, instance, owner=None):
        if instance is None:
            if self.fclass is None:
                return self.finstance
            return types.MethodType(self.fclass, owner)
        return types.MethodType(self.finstance, instance)


class BetterSet(Generic[V]):
    """Set preserving insertion order, with chainable and functional helpers

    Mutators (add, add_all, clear, delete_all, keep_all, from_list, and the
    instance forms of difference, intersection and union) modify the set in
    place and return it, so calls may be chained. delete() is the exception:
    it returns whether a value was removed.

    filter(), reject(), copy(), and the class-level forms of union(),
    intersection() and from_list() build a new set and leave their inputs
    untouched:

        >>> a, b = BetterSet([1, 2]), BetterSet([2, 3])
        >>> BetterSet.union(a, b)
        BetterSet([1, 2, 3])
        >>> a
        BetterSet([1, 2])
        >>> a.union(b)
        BetterSet([1, 2, 3])
        >>> a
        BetterSet([1, 2, 3])

    Any other method may also be called on the class, passing the set as the
    first argument (``BetterSet.to_list(s)``), which is equivalent to calling
    it on the instance.
    """

    __hash__ = None

    def __init__(self, values: Iterable[V] = ()):
        if isinstance(values, BetterSet):
            values = values._items
        self._items: Dict[V, None] = {value: None for value in values}

    def __iter__(self) -> Iterator[V]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, value: V) -> bool:
        return value in self._items

    def __repr__(self):
        cls = self.__class__.__name__
        if self._items:
            return f"{cls}([{', '.join(map(repr, self._items))}])"
        else:
            return f'{cls}()'

    def __eq__(self, other):
        if isinstance(other, BetterSet):
            return self._items.keys() == other._items.keys()
        if isinstance(other, (set, frozenset)):
            return self._items.keys() == other
        return NotImplemented

    @property
    def size(self) -> int:
        """Number of values in the set"""
        return len(self._items)

    def get_size(self) -> int:
        return self.size

    def copy(self) -> 'BetterSet[V]':
        return type(self)(self)

    ###
    # Mutators
    #

    def add(self, value: V) -> 'BetterSet[V]':
        """Add a value, if not already present"""
        self._items[value] = None
        return self

    def add_all(self, values: Iterable[V]) -> 'BetterSet[V]':
        """Add every value of an iterable, in its iteration order"""
        self._items.update({value: None for value in values})
        return self

    def clear(self) -> 'BetterSet[V]':
        self._items.clear()
        return self

    def delete(self, value: V) -> bool:
        """Remove a value, returning whether it was present"""
        if value in self._items:
            del self._items[value]
            return True
        return False

    def delete_all(self, predicate: Predicate) -> 'BetterSet[V]':
        """Remove every value for which predicate(value) is truthy

        The values are traversed from a snapshot, so each is tested at most
        once even as removals happen. Values removed by the predicate itself
        before their turn are skipped. If the predicate raises, removals made
        before the failure are kept.
        """
        for value in list(self._items):
            if value in self._items and predicate(value):
                self._items.pop(value, None)
        return self

    def keep_all(self, predicate: Predicate) -> 'BetterSet[V]':
        """Remove every value for which predicate(value) is falsy"""
        return self.delete_all(lambda value: not predicate(value))

    @hybridmethod
    def from_list(self, values: Iterable[V]) -> 'BetterSet[V]':
        """Replace the contents of the set with the given values

        Called on the class, builds a new set from the values instead.
        """
        values = list(values)
        self._items.clear()
        for value in values:
            self.add(value)
        return self

    @from_list.classmethod
    def from_list(cls, values: Iterable[V]) -> 'BetterSet[V]':
        return cls().from_list(values)

    ###
    # Queries
    #

    def has(self, value: V) -> bool:
        return value in self._items

    def entries(self) -> Iterator[Tuple[V, V]]:
        """Iterate (value, value) pairs in insertion order

        The pair shape mirrors a mapping's items(), with each value serving as
        its own key. The iterator is live: adding or deleting values while it
        is consumed raises RuntimeError, as with a dict. Iterate to_list() to
        modify the set along the way.
        """
        return ((value, value) for value in self._items)

    def values(self) -> Iterator[V]:
        """Iterate the values in insertion order

        Like entries(), the iterator is live, and raises RuntimeError if the
        set changes size while it is consumed.
        """
        return iter(self._items)

    keys = values

    def for_each(self, callback: Callable[..., Any], this_arg: Any = NOTSET) -> None:
        """Call callback(value) for each value, in insertion order

        If this_arg is passed, the callback is bound to it, and called as
        callback(this_arg, value). The callback may modify the set: values it
        deletes are not visited, and values it adds are not visited either.
        """
        if this_arg is not NOTSET:
            callback = functools.partial(callback, this_arg)

        for value in list(self._items):
            if value in self._items:
                callback(value)

    def to_list(self) -> List[V]:
        return list(self._items)

    def push_to(self, target: List[V]) -> List[V]:
        """Append each value to target, and return target"""
        target.extend(self._items)
        return target

    ###
    # Set algebra
    #

    def difference(self, other: Iterable[V]) -> 'BetterSet[V]':
        """Remove every value which is also in other

        There is no class-level form of difference: BetterSet.difference(a, b)
        mutates a, just like a.difference(b).
        """
        if other is self:
            return self.clear()

        for value in other:
            self._items.pop(value, None)
        return self

    @hybridmethod
    def intersection(self, other: Container[V]) -> 'BetterSet[V]':
        """Remove every value which is not also in other

        Called on the class, returns a new set holding the values common to
        both arguments, which are left unmodified.
        """
        return self.keep_all(lambda value: value in other)

    @intersection.classmethod
    def intersection(cls, set1: Collection[V], set2: Collection[V]) -> 'BetterSet[V]':
        # Copy the smaller side, so fewer membership tests are made
        if len(set1) < len(set2):
            return cls(set1).intersection(set2)
        else:
            return cls(set2).intersection(set1)

    @hybridmethod
    def union(self, other: Iterable[V]) -> 'BetterSet[V]':
        """Add every value of other

        Called on the class, returns a new set with the values of the first
        argument followed by the new values of the second.
        """
        return self.add_all(other)

    @union.classmethod
    def union(cls, set1: Iterable[V], set2: Iterable[V]) -> 'BetterSet[V]':
        return cls(set1).union(set2)

    def are_all_in(self, other: Container[V]) -> bool:
        """Return whether every value of the set is also in other

        That is, whether the set is a subset of (or equal to) other.
        """
        return self.every(lambda value: value in other)

    ###
    # Combinators
    #

    def map(self, callback: Callable[[V], R]) -> List[R]:
        """Return a list of callback(value) for each value

        The results are not deduplicated.
        """
        return [callback(value) for value in self._items]

    def filter(self, predicate: Predicate) -> 'BetterSet[V]':
        """Return a new set of the values passing the predicate"""
        return type(self)(value for value in self._items if predicate(value))

    def reject(self, predicate: Predicate) -> 'BetterSet[V]':
        """Return a new set of the values failing the predicate"""
        return self.filter(lambda value: not predicate(value))

    def every(self, predicate: Predicate) -> bool:
        for value in self._items:
            if not predicate(value):
                return False
        return True

    def any(self, predicate: Predicate) -> bool:
        for value in self._items:
            if predicate(value):
                return True
        return False

    def none(self, predicate: Predicate) -> bool:
        return not self.any(predicate)
