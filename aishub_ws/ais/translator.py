"""AisHub response decoding and record translation.

Provides:
- Decoding of the AisHub ``[status, records]`` response
- Translation of one vessel record into a Signal K delta
- Batch translation that skips malformed records
"""

import json
import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence, Union

from aishub_ws.ais.adapters.base import AISDataFetchError
from aishub_ws.ais.mappings import MAPPINGS, MappingRule, convert_time
from aishub_ws.ais.models import (
    DEFAULT_SOURCE_LABEL,
    Delta,
    PathValue,
    RawVesselRecord,
    Update,
)

logger = logging.getLogger(__name__)

MMSI_CONTEXT_PREFIX = "vessels.urn:mrn:imo:mmsi:"


class UpstreamError(AISDataFetchError):
    """Raised when AisHub flags the whole response as an error."""

    pass


class MalformedRecordError(ValueError):
    """Raised when a single vessel record cannot be translated."""

    def __init__(self, message: str, record: Any = None):
        self.record = record
        super().__init__(message)


def vessel_context(mmsi: Any) -> str:
    """Build the Signal K context for a vessel MMSI."""
    return f"{MMSI_CONTEXT_PREFIX}{mmsi}"


def parse_response(
    payload: Union[str, bytes, Sequence[Any]],
    source: Optional[str] = None,
) -> list[RawVesselRecord]:
    """Decode an AisHub JSON response into its vessel records.

    Args:
        payload: Response body, or the already decoded JSON array
        source: Source name used in error messages

    Returns:
        List of raw vessel records (may be empty)

    Raises:
        UpstreamError: If the response carries the ERROR flag or is not
            the expected ``[status, records]`` array
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise UpstreamError(f"Invalid JSON response: {e}", source=source)

    if not isinstance(payload, list) or not payload:
        raise UpstreamError("Unexpected response structure", source=source)

    status = payload[0]
    if not isinstance(status, Mapping):
        raise UpstreamError("Missing response status", source=source)

    if status.get("ERROR"):
        logger.error(f"Error response from AisHub: {json.dumps(status)}")
        message = status.get("ERROR_MESSAGE") or "AisHub reported an error"
        raise UpstreamError(str(message), source=source)

    if len(payload) < 2 or payload[1] is None:
        return []

    records = payload[1]
    if not isinstance(records, list):
        raise UpstreamError("Vessel records are not a list", source=source)

    return records


class RecordTranslator:
    """Translates AisHub vessel records into Signal K deltas."""

    def __init__(
        self,
        self_context: str,
        mappings: Iterable[MappingRule] = MAPPINGS,
        source_label: str = DEFAULT_SOURCE_LABEL,
    ):
        """Initialize translator.

        Args:
            self_context: Context of the observing vessel, never reported
            mappings: Mapping rule table
            source_label: Label written into every update's source
        """
        self.self_context = self_context
        self.mappings = tuple(mappings)
        self.source_label = source_label

    def translate(self, record: RawVesselRecord) -> Optional[Delta]:
        """Translate one AisHub record.

        Args:
            record: Raw vessel record

        Returns:
            Delta for the vessel, or None when the record is the observer itself

        Raises:
            MalformedRecordError: If the record has no MMSI or a field
                cannot be converted
        """
        if not isinstance(record, Mapping):
            raise MalformedRecordError(
                f"Vessel record is not an object: {record!r}", record=record
            )

        mmsi = record.get("MMSI")
        if mmsi is None or mmsi == "":
            raise MalformedRecordError("Vessel record has no MMSI", record=record)

        context = vessel_context(mmsi)
        if context == self.self_context:
            logger.debug(f"Ignoring vessel: {context}")
            return None

        timestamp = None
        raw_time = record.get("TIME")
        if raw_time is not None:
            if not isinstance(raw_time, str):
                raise MalformedRecordError(
                    f"Invalid TIME for {context}: {raw_time!r}", record=record
                )
            timestamp = convert_time(record, raw_time)

        values = []
        for mapping in self.mappings:
            value = self._apply(mapping, record, context)
            if value is not None:
                values.append(value)

        return Delta(
            context=context,
            updates=(
                Update(
                    source_label=self.source_label,
                    values=tuple(values),
                    timestamp=timestamp,
                ),
            ),
        )

    def _apply(
        self,
        mapping: MappingRule,
        record: RawVesselRecord,
        context: str,
    ) -> Optional[PathValue]:
        if mapping.key not in record:
            return None

        value = record[mapping.key]
        if value is None:
            return None
        if isinstance(value, str) and len(value) == 0:
            return None

        if mapping.conversion:
            try:
                value = mapping.conversion(record, value)
            except (TypeError, ValueError, AttributeError) as e:
                raise MalformedRecordError(
                    f"Cannot convert {mapping.key} for {context}: {e}",
                    record=record,
                )
            if value is None:
                return None

        if mapping.root:
            return PathValue("", {mapping.path: value})
        return PathValue(mapping.path, value)

    def translate_batch(self, records: Iterable[RawVesselRecord]) -> list[Delta]:
        """Translate a batch of records, preserving their order.

        Self reports are dropped; malformed records are logged and skipped.

        Args:
            records: Raw vessel records

        Returns:
            List of deltas
        """
        deltas = []

        for record in records:
            logger.debug(f"Found vessel {record}")
            try:
                delta = self.translate(record)
            except MalformedRecordError as e:
                logger.warning(f"Skipping vessel record: {e}")
                continue

            if delta is None:
                continue

            logger.debug(f"Vessel delta: {delta.to_dict()}")
            deltas.append(delta)

        return deltas

    def translate_response(
        self,
        payload: Union[str, bytes, Sequence[Any]],
        source: Optional[str] = None,
    ) -> list[Delta]:
        """Decode an AisHub response and translate all of its records.

        Raises:
            UpstreamError: If the response is flagged as an error
        """
        return self.translate_batch(parse_response(payload, source=source))
