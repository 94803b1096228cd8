# SPDX-FileCopyrightText: Copyright (c) 2025 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pydantic import BaseModel, ConfigDict


class NSQBaseModel(BaseModel):
    """Base model for the nsqd status document.

    Models are frozen, ignore unknown keys (nsqd adds fields between releases)
    and accept both the wire alias and the python field name.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
