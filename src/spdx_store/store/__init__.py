from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

import stevedore
from stevedore.exception import NoMatches

from spdx_store.config import ConfigSection
from spdx_store.error import InvalidInputError

if TYPE_CHECKING:
    from typing import Any, Optional
    from spdx_store.store.backends.base import ModelStore

BACKEND_NAMESPACE = "spdx_store.backend"


@dataclass
class StoreConfig(ConfigSection):
    title: ClassVar[str] = "store"

    backend: str = "memory"


def load_store(name: Optional[str] = None, configuration: Any = None) -> ModelStore:
    """Instantiate a model store backend.

    :param name: name of the backend entry point, when None use the backend
        set in the [store] configuration section
    :param configuration: backend specific configuration
    """
    if name is None:
        name = StoreConfig.load().backend
    try:
        plugin = stevedore.DriverManager(
            namespace=BACKEND_NAMESPACE,
            name=name,
            invoke_on_load=True,
            invoke_args=(configuration,),
        )
    except NoMatches as err:
        raise InvalidInputError(str(err), origin="load_store") from err
    return plugin.driver
