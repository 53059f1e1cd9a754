"""Ask the user before a mutation is sent.

A mutation with rows asks a yes/no question; a mutation with nothing to send
only tells the user so and is never confirmed.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping

from gridnet.application.interfaces import IPrompter
from gridnet.config import DEFAULT_LOCALE
from gridnet.domain.models import RequestKind

LOGGER = logging.getLogger(__name__)

# Per locale: the question for count > 0, the notice for count == 0, and the
# verb forms each template interpolates.
MESSAGE_CATALOG: Dict[str, Dict[str, object]] = {
    "en": {
        "confirm": "{count} record(s) will be {done}. Do you want to proceed?",
        "empty": "There are no records to {action}.",
        "actions": {
            "create": ("create", "created"),
            "update": ("update", "updated"),
            "delete": ("delete", "deleted"),
            "modify": ("apply", "applied"),
        },
    },
    "ko": {
        "confirm": "{count}건의 데이터를 {action}하시겠습니까?",
        "empty": "{action}할 데이터가 없습니다.",
        "actions": {
            "create": ("입력", "입력"),
            "update": ("수정", "수정"),
            "delete": ("삭제", "삭제"),
            "modify": ("반영", "반영"),
        },
    },
}

TRANSPORT_FAILURE_NOTICE: Mapping[str, str] = {
    "en": "An error occurred while requesting data.\n\nPlease try again.",
    "ko": "데이터 요청 중에 에러가 발생하였습니다.\n\n다시 시도하여 주시기 바랍니다.",
}


def supported_locales() -> list[str]:
    return sorted(MESSAGE_CATALOG)


def confirm_message(kind: RequestKind, count: int, locale: str = DEFAULT_LOCALE) -> str:
    """Return the question (``count > 0``) or the nothing-to-do notice."""

    kind = RequestKind.parse(kind)
    if not kind.is_mutation:
        raise ValueError("Reads are never confirmed")
    catalog = MESSAGE_CATALOG.get(locale) or MESSAGE_CATALOG[DEFAULT_LOCALE]
    action, done = catalog["actions"][kind.profile.action]
    if count > 0:
        return catalog["confirm"].format(count=count, action=action, done=done)
    return catalog["empty"].format(action=action)


class ConfirmationGate:
    def __init__(self, prompter: IPrompter, locale: str = DEFAULT_LOCALE) -> None:
        self._prompter = prompter
        self._locale = locale

    @property
    def locale(self) -> str:
        return self._locale

    def confirm(self, kind: RequestKind, count: int) -> bool:
        message = confirm_message(kind, count, self._locale)
        if count > 0:
            accepted = bool(self._prompter.ask(message))
            LOGGER.debug("Confirmation for %s (%d rows): %s", kind, count, accepted)
            return accepted
        self._prompter.inform(message)
        return False
