# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nsq_exporter.common.mixins.logger_mixin import LoggerMixin, LogMessage

__all__ = ["LogMessage", "LoggerMixin"]
