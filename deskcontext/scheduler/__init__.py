# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Scheduler module
"""

from deskcontext.scheduler.task_scheduler import TaskScheduler, job_wrapper

__all__ = ["TaskScheduler", "job_wrapper"]
