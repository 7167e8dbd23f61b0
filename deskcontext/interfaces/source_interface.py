#!/usr/bin/env python
# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0


"""
Context source interface definition
"""

import abc
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


class ISource(abc.ABC, Generic[T]):
    """
    Context source interface

    A source produces one artifact of desktop context, or its default value,
    within its own time budget. Implementations must not raise from ``capture``.
    """

    @abc.abstractmethod
    def get_name(self) -> str:
        """
        Get the source name

        Returns:
            str: Source name
        """

    @property
    @abc.abstractmethod
    def timeout(self) -> Optional[float]:
        """Time budget in seconds, None for no limit"""

    @abc.abstractmethod
    def default(self) -> T:
        """
        Value returned when the source cannot obtain its data

        Returns:
            T: Default artifact
        """

    @abc.abstractmethod
    async def capture(self) -> T:
        """
        Capture the artifact

        Returns:
            T: Captured artifact or the default value on failure or timeout
        """

    @abc.abstractmethod
    def get_status(self) -> Dict[str, Any]:
        """
        Get source status and counters

        Returns:
            Dict[str, Any]: Status information
        """
