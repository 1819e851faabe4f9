from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import Config
from ..services.aggregate_service import AggregateService
from ..services.io_files import IOService
from ..services.profile_service import ProfileService
from ..services.validate_service import ValidateService


@dataclass(frozen=True)
class Container:
    io: IOService
    profile: ProfileService
    validate: ValidateService
    aggregate: AggregateService


def build_container(base_logger_name: str, cfg: Config) -> Container:
    base = logging.getLogger(base_logger_name)
    return Container(
        io=IOService(base.getChild("io")),
        profile=ProfileService(base.getChild("profile")),
        validate=ValidateService(base.getChild("validate")),
        aggregate=AggregateService(base.getChild("aggregate")),
    )
