# -*- coding: utf-8 -*-

# Copyright (c) 2025 Beijing Volcano Engine Technology Co., Ltd.
# SPDX-License-Identifier: Apache-2.0

"""
Delivery module - forwards captures to the collector
"""

from deskcontext.delivery.webhook_service import WebhookService

__all__ = ["WebhookService"]
