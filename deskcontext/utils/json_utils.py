# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
JSON helpers for command output and ad-hoc webhook bodies
"""

import datetime
import enum
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel


class CaptureJSONEncoder(json.JSONEncoder):
    """Encodes pydantic models with their camelCase aliases, plus dates, enums and paths"""

    def default(self, obj):
        if isinstance(obj, BaseModel):
            return obj.model_dump(mode="json", by_alias=True)
        if isinstance(obj, (datetime.datetime, datetime.date)):
            return obj.isoformat()
        if isinstance(obj, enum.Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def dumps(data: Any, indent: Optional[int] = None) -> str:
    """Serialize to JSON, keeping non-ASCII text readable"""
    return json.dumps(data, cls=CaptureJSONEncoder, indent=indent, ensure_ascii=False)
