"""Minimal model and collection types persisted through local sync.

`Model` is a pydantic model exposing the record interface the dispatcher
consumes (`id_attribute`, `get_id`, `to_json`, `resolve_store`) plus the
familiar `save`/`fetch`/`destroy` verbs. `Collection` groups models of one
type and can load every stored record at once.

    class Todo(Model):
        title: str = ""
        done: bool = False

    attach(Todo, "todos", substrate)
    todo = Todo(title="write docs")
    todo.save()          # assigns a generated id
"""
from __future__ import annotations
from typing import Any, Callable, ClassVar, Dict, Iterator, List, Mapping, Optional, Type, Union

from pydantic import BaseModel, PrivateAttr

from localstore_lib.errors import StoreResolutionError
from localstore_lib.storage.collection_store import CollectionStore, is_blank_id
from localstore_lib.sync.dispatcher import SyncOptions, local_sync

Options = Union[SyncOptions, Mapping[str, Any], None]


def _wrap_options(options: Options, on_success: Callable[[Any], None], outcome: List[bool]) -> SyncOptions:
    """Chain `on_success` in front of the caller's success callback."""
    opts = SyncOptions.coerce(options)
    user_success = opts.success
    user_error = opts.error

    def success(resp: Any) -> None:
        outcome.append(True)
        on_success(resp)
        if user_success:
            user_success(resp)

    def error(message: str) -> None:
        outcome.append(False)
        if user_error:
            user_error(message)

    return SyncOptions(success=success, error=error, complete=opts.complete)


class Model(BaseModel):
    id_attribute: ClassVar[str] = "id"
    local_storage: ClassVar[Optional[CollectionStore]] = None
    sync: ClassVar[Callable[..., None]] = staticmethod(local_sync)

    id: Optional[str] = None

    _collection: Optional["Collection"] = PrivateAttr(default=None)

    @property
    def collection(self) -> Optional["Collection"]:
        return self._collection

    def get_id(self) -> Any:
        return getattr(self, self.id_attribute, None)

    def is_new(self) -> bool:
        return is_blank_id(self.get_id())

    def to_json(self) -> Dict[str, Any]:
        """Plain JSON-ready dict of every field; the id is left out until assigned."""
        data = self.model_dump(mode="json")
        if is_blank_id(data.get(self.id_attribute)):
            data.pop(self.id_attribute, None)
        return data

    def set(self, attrs: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> "Model":
        """Assign attributes; keys that are not model fields are ignored."""
        values = dict(attrs or {}, **kwargs)
        fields = type(self).model_fields
        for key, value in values.items():
            if key in fields:
                setattr(self, key, value)
        return self

    def resolve_store(self) -> CollectionStore:
        store = type(self).local_storage
        if store is None and self._collection is not None:
            store = self._collection.local_storage
        if store is None:
            raise StoreResolutionError(f"{type(self).__name__} has no local storage attached")
        return store

    def _apply(self, resp: Any) -> None:
        if isinstance(resp, Mapping):
            self.set(resp)

    def _refresh(self, resp: Any) -> None:
        """Apply a fetched payload; fields it lacks go back to their defaults."""
        if not isinstance(resp, Mapping):
            return
        for name, field in type(self).model_fields.items():
            if name not in resp and name != self.id_attribute and not field.is_required():
                setattr(self, name, field.get_default(call_default_factory=True))
        self.set(resp)

    def save(self, options: Options = None) -> bool:
        """Create or update this model. Returns True on success."""
        method = "create" if self.is_new() else "update"
        outcome: List[bool] = []
        self.sync(method, self, _wrap_options(options, self._apply, outcome))
        return bool(outcome and outcome[0])

    def fetch(self, options: Options = None) -> bool:
        """Reload attributes from storage. Returns True on success."""
        outcome: List[bool] = []
        self.sync("read", self, _wrap_options(options, self._refresh, outcome))
        return bool(outcome and outcome[0])

    def destroy(self, options: Options = None) -> bool:
        """Delete this model from storage and from its collection."""
        if self.is_new():
            self._detach()
            return True
        outcome: List[bool] = []
        self.sync("delete", self, _wrap_options(options, lambda resp: self._detach(), outcome))
        return bool(outcome and outcome[0])

    def _detach(self) -> None:
        if self._collection is not None:
            self._collection.remove(self)


class Collection:
    """An ordered group of models sharing one store."""

    id_attribute: ClassVar[str] = "id"
    local_storage: Optional[CollectionStore] = None
    sync = staticmethod(local_sync)

    def __init__(
        self,
        model_type: Type[Model],
        models: Optional[List[Model]] = None,
        local_storage: Optional[CollectionStore] = None,
    ) -> None:
        self.model_type = model_type
        if local_storage is not None:
            self.local_storage = local_storage
        elif self.local_storage is None:
            self.local_storage = model_type.local_storage
        self.models: List[Model] = []
        for model in models or []:
            self.add(model)

    def get_id(self) -> Any:
        return None

    def to_json(self) -> List[Dict[str, Any]]:
        return [m.to_json() for m in self.models]

    def resolve_store(self) -> CollectionStore:
        if self.local_storage is None:
            raise StoreResolutionError(f"{type(self).__name__} has no local storage attached")
        return self.local_storage

    def add(self, model: Model) -> Model:
        model._collection = self
        if not any(m is model for m in self.models):
            self.models.append(model)
        return model

    def remove(self, model: Model) -> None:
        self.models = [m for m in self.models if m is not model]
        if model._collection is self:
            model._collection = None

    def get(self, record_id: Any) -> Optional[Model]:
        for model in self.models:
            if model.get_id() == record_id:
                return model
        return None

    def create(self, **attrs: Any) -> Model:
        """Build a model from `attrs`, add it to the collection and save it."""
        model = self.add(self.model_type(**attrs))
        model.save()
        return model

    def _reset(self, resp: Any) -> None:
        for model in self.models:
            model._collection = None
        self.models = []
        for payload in resp or []:
            self.add(self.model_type(**payload))

    def fetch(self, options: Options = None) -> bool:
        """Replace the collection's models with every stored record."""
        outcome: List[bool] = []
        self.sync("read", self, _wrap_options(options, self._reset, outcome))
        return bool(outcome and outcome[0])

    def __len__(self) -> int:
        return len(self.models)

    def __iter__(self) -> Iterator[Model]:
        return iter(list(self.models))
