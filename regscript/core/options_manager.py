# regscript
# Copyright (c) 2018-2020 Arm Limited
# Copyright (c) 2026 The regscript Authors
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import logging
from typing import (Any, Dict, List, Mapping, Optional)

from .options import OPTIONS_INFO

LOG = logging.getLogger(__name__)

class OptionsManager:
    """@brief Layered session options.

    When an option's value is accessed, the highest priority layer that contains a value for the
    option is used. This makes it easy to load options from keyword arguments, a config file, and
    caller supplied defaults. The default value specified for an option in OPTIONS_INFO acts as a
    layer with an infinitely low priority.
    """

    def __init__(self) -> None:
        self._layers: List[Dict[str, Any]] = []

    def add_front(self, new_options: Optional[Mapping[str, Any]]) -> None:
        """@brief Add a new highest priority layer of option values."""
        if new_options is not None:
            self._layers.insert(0, self._convert_options(new_options))

    def add_back(self, new_options: Optional[Mapping[str, Any]]) -> None:
        """@brief Add a new lowest priority layer of option values."""
        if new_options is not None:
            self._layers.append(self._convert_options(new_options))

    def _convert_options(self, new_options: Mapping[str, Any]) -> Dict[str, Any]:
        """@brief Prepare a dictionary of session options for use by the manager.

        1. Strip dictionary entries with a value of None.
        2. Replace double-underscores ("__") with a dot (".").
        3. Convert option names to all-lowercase.
        """
        output = {}
        for name, value in new_options.items():
            if value is None:
                continue
            name = name.replace("__", ".").lower()
            if name not in OPTIONS_INFO:
                LOG.debug("unknown session option '%s'", name)
            output[name] = value
        return output

    def is_set(self, key: str) -> bool:
        """@brief Return whether any layer has a value for the specified option."""
        return any(key in layer for layer in self._layers)

    def get_default(self, key: str) -> Any:
        """@brief Return the default value for the specified option."""
        if key in OPTIONS_INFO:
            return OPTIONS_INFO[key].default
        else:
            return None

    def get(self, key: str) -> Any:
        """@brief Return the highest priority value for the option, or its default."""
        for layer in self._layers:
            if key in layer:
                return layer[key]
        return self.get_default(key)

    def set(self, key: str, value: Any) -> None:
        """@brief Set an option in the current highest priority layer."""
        self.update({key: value})

    def update(self, new_options: Mapping[str, Any]) -> None:
        """@brief Set multiple options in the current highest priority layer."""
        if not self._layers:
            self._layers.append({})
        self._layers[0].update(self._convert_options(new_options))

    def __contains__(self, key: str) -> bool:
        return self.is_set(key)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)
