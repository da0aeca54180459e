"""
Configuration-driven bridge between drawing elements and backend records.

The bridge converts DrawingElement dicts into whatever JSON shape the line
storage API expects (export) and back into elements plus layers the drawing
engine can consume (import). The mapping is declared once in a
BridgeConfig; the bridge never performs I/O and keeps no state besides that
configuration.
"""
import copy
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Union

from core.config import BRIDGE_STRICT_CONFIG
from core.constants import (
    DEFAULT_LAYER_NAME_PREFIX,
    DEFAULT_LAYER_OPACITY,
    DEFAULT_LAYER_VISIBILITY,
    SYNC_STATE_SAVED,
    UNKNOWN_LAYER_PLACEHOLDER,
)
from core.sentinels import MISSING, or_none
from models.bridge_config import BridgeConfig, CustomFieldMapping
from services.bridge_expressions import (
    OutputExpr,
    PairArrayExpr,
    PathExpr,
    SourceExpr,
    TransformCallExpr,
    iter_transform_names,
    parse_output_mapping,
    parse_source_mapping,
)
from services.bridge_transforms import (
    FORWARD_TRANSFORMS,
    REVERSE_TRANSFORMS,
    BridgeError,
    apply_forward_transform,
    apply_reverse_transform,
)
from shared_types.drawing import DrawingElement, ImportResult, LayerInfo
from utils.datetime_utils import now_ms
from utils.dict_utils import deep_merge, delete_nested_value, get_nested_value, set_nested_value, split_path
from utils.drawing_validators import is_valid_element, is_valid_layer

logger = logging.getLogger(__name__)

# Plain paths that get a synthesized value when empty on export
_FALLBACK_SUFFIXES = {
    "info.name": "name",
    "info.description": "description",
}


class BridgeConfigError(BridgeError):
    """Raised by a strict bridge when its configuration references unknown transforms."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("Invalid bridge configuration: " + "; ".join(errors))


@dataclass(frozen=True)
class _OutputField:
    name: str
    mapping: Union[Callable[..., Any], OutputExpr]


@dataclass(frozen=True)
class _InputField:
    source_mapping: str
    source: SourceExpr
    destination: str
    custom_transform: Optional[Callable[[Any], Any]] = None


def _coerce_config(config: Union[BridgeConfig, Mapping[str, Any]]) -> BridgeConfig:
    if isinstance(config, BridgeConfig):
        return config
    return BridgeConfig.model_validate(config)


def _compile_input_fields(mapping: Mapping[str, Union[str, CustomFieldMapping]]) -> List[_InputField]:
    fields: List[_InputField] = []
    for source_mapping, destination in mapping.items():
        if isinstance(destination, CustomFieldMapping):
            fields.append(_InputField(
                source_mapping=source_mapping,
                source=parse_source_mapping(source_mapping),
                destination=destination.key,
                custom_transform=destination.transform,
            ))
        else:
            fields.append(_InputField(
                source_mapping=source_mapping,
                source=parse_source_mapping(source_mapping),
                destination=destination,
            ))
    return fields


def collect_config_errors(config: Union[BridgeConfig, Mapping[str, Any]]) -> List[str]:
    """
    Report transform names and destinations that cannot work at runtime.

    Checks every output mapping string (including per-axis transforms of
    pair arrays) against FORWARD_TRANSFORMS, and every wrapped source key
    without a custom transform against REVERSE_TRANSFORMS.
    """
    config = _coerce_config(config)
    errors: List[str] = []

    for field_name, mapping in config.output.items():
        if callable(mapping):
            continue
        for name in iter_transform_names(parse_output_mapping(mapping)):
            if name not in FORWARD_TRANSFORMS:
                errors.append(f"Output field '{field_name}': Unknown transformation function: {name}")

    for section, mapping in (("elements", config.input.elements), ("layers", config.input.layers)):
        for field in _compile_input_fields(mapping):
            if not field.destination:
                errors.append(f"Input {section} mapping '{field.source_mapping}': empty destination path")
            if (
                field.custom_transform is None
                and field.source.transform is not None
                and field.source.transform not in REVERSE_TRANSFORMS
            ):
                errors.append(
                    f"Input {section} mapping '{field.source_mapping}': "
                    f"Unknown reverse transformation function: {field.source.transform}"
                )

    return errors


def validate_bridge_config(config: Union[BridgeConfig, Mapping[str, Any]]) -> List[str]:
    """
    Return a list of configuration problems; empty list means OK.

    In addition to collect_config_errors, an export mapping with no fields is
    reported.
    """
    config = _coerce_config(config)
    errors: List[str] = []
    if not config.output:
        errors.append("Bridge configuration must have at least one output field mapping")
    errors.extend(collect_config_errors(config))
    return errors


class DrawingBridge:
    """
    Bidirectional transformer between drawing elements and backend records.

    Handles:
    - Export of completed elements through the output mapping table
    - Import of source records into elements (input.elements) and layers
      (input.layers), dropping anything that fails structural validation
    - Linking imported elements to their layers (layer elementIds)
    - Runtime reconfiguration via update_config

    Field-level failures are logged and degrade to partial output; nothing
    here raises during export or import.
    """

    def __init__(self, config: Union[BridgeConfig, Mapping[str, Any]], strict: Optional[bool] = None):
        """
        Args:
            config: BridgeConfig or an equivalent dict
            strict: Raise BridgeConfigError on unknown transform names instead
                of degrading affected fields at export time. Defaults to
                BRIDGE_STRICT_CONFIG.

        Raises:
            pydantic.ValidationError: If config is structurally wrong
            BridgeConfigError: If strict and the config references unknown transforms
        """
        self._strict = BRIDGE_STRICT_CONFIG if strict is None else strict
        self._apply_config(copy.deepcopy(_coerce_config(config)))

    def _apply_config(self, config: BridgeConfig) -> None:
        if self._strict:
            errors = collect_config_errors(config)
            if errors:
                raise BridgeConfigError(errors)

        self._config = config
        self._output_fields = [
            _OutputField(
                name=name,
                mapping=mapping if callable(mapping) else parse_output_mapping(mapping),
            )
            for name, mapping in config.output.items()
        ]
        self._element_fields = _compile_input_fields(config.input.elements)
        self._layer_fields = _compile_input_fields(config.input.layers)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def update_config(self, new_config: Union[BridgeConfig, Mapping[str, Any]]) -> None:
        """
        Merge a partial configuration into the current one.

        Output fields and input element/layer mappings are merged key by key:
        new keys are added, existing keys overwritten, nothing is dropped.
        """
        if isinstance(new_config, BridgeConfig):
            partial: Dict[str, Any] = new_config.to_mapping()
        else:
            partial = dict(new_config)

        merged = deep_merge(self._config.to_mapping(), partial)
        self._apply_config(BridgeConfig.model_validate(merged))
        logger.debug(
            f"Bridge config updated: {len(self._output_fields)} output fields, "
            f"{len(self._element_fields)} element mappings, {len(self._layer_fields)} layer mappings"
        )

    def get_config(self) -> BridgeConfig:
        """Return a copy of the current configuration; mutating it does not affect the bridge."""
        return self._config.model_copy(deep=True)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self, elements: Optional[Iterable[DrawingElement]]) -> List[Dict[str, Any]]:
        """
        Export completed elements, preserving input order.

        Elements whose completed flag is not exactly True are skipped.
        """
        completed = [
            element for element in (elements or [])
            if isinstance(element, dict) and element.get("completed") is True
        ]
        results = [self._export_single(element) for element in completed]
        logger.debug(f"Exported {len(results)} completed elements")
        return results

    def export_single(self, element: DrawingElement) -> Dict[str, Any]:
        """Export one element regardless of its completed flag."""
        return self._export_single(element)

    def _export_single(self, element: DrawingElement) -> Dict[str, Any]:
        # Mappings never see the rest of the batch: callables get elements=None
        # and elementIndex resolves to 0
        result: Dict[str, Any] = {}

        for field in self._output_fields:
            try:
                result[field.name] = self._resolve_field_value(field.mapping, element, None)
            except Exception as e:
                # One bad field never aborts the element
                logger.warning(
                    f"Failed to resolve field mapping for {field.name} on element {element.get('id')}: {e}",
                    exc_info=True
                )
                result[field.name] = None

        return result

    def _resolve_field_value(
        self,
        mapping: Union[Callable[..., Any], OutputExpr],
        element: DrawingElement,
        elements: Optional[Sequence[DrawingElement]],
    ) -> Any:
        if callable(mapping):
            return mapping(element, element, elements)

        if isinstance(mapping, TransformCallExpr):
            value = get_nested_value(element, mapping.path)
            return apply_forward_transform(mapping.transform, value, element, elements)

        if isinstance(mapping, PairArrayExpr):
            return self._resolve_pair_array(mapping, element, elements)

        return self._resolve_path(mapping, element)

    def _resolve_path(self, mapping: PathExpr, element: DrawingElement) -> Any:
        value = get_nested_value(element, mapping.path)

        if value is MISSING or value is None or value == "":
            suffix = _FALLBACK_SUFFIXES.get(mapping.path)
            if suffix:
                layer_id = element.get("layerId") or UNKNOWN_LAYER_PLACEHOLDER
                return f"{layer_id}_{element.get('type')}_{suffix}"

        return copy.deepcopy(or_none(value))

    def _resolve_pair_array(
        self,
        mapping: PairArrayExpr,
        element: DrawingElement,
        elements: Optional[Sequence[DrawingElement]],
    ) -> List[List[Any]]:
        x_parts = split_path(mapping.x.path)
        y_parts = split_path(mapping.y.path)

        # Longest proper prefix of the x path that is an array on the element,
        # e.g. "detection.entry" for "detection.entry.x"
        base_length = 0
        array_value: Any = None
        for length in range(len(x_parts) - 1, 0, -1):
            candidate = get_nested_value(element, ".".join(x_parts[:length]))
            if isinstance(candidate, list):
                base_length = length
                array_value = candidate
                break

        if array_value is None:
            candidate = get_nested_value(element, x_parts[0]) if x_parts else MISSING
            if not isinstance(candidate, list):
                return []
            base_length = 1
            array_value = candidate

        x_sub_path = ".".join(x_parts[base_length:])
        y_sub_path = ".".join(y_parts[base_length:])

        pairs: List[List[Any]] = []
        for item in array_value:
            x_value = get_nested_value(item, x_sub_path)
            y_value = get_nested_value(item, y_sub_path)
            if isinstance(mapping.x, TransformCallExpr):
                x_value = apply_forward_transform(mapping.x.transform, x_value, element, elements)
            if isinstance(mapping.y, TransformCallExpr):
                y_value = apply_forward_transform(mapping.y.transform, y_value, element, elements)
            pairs.append([or_none(x_value), or_none(y_value)])
        return pairs

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_records(self, records: Optional[Iterable[Any]]) -> ImportResult:
        """
        Import backend records into elements and layers.

        Steps:
        1. Transform every record into an element and keep the valid ones
        2. Build layers from the same records (deduplicated by id) and keep
           the valid ones
        3. Link valid elements into their layer's elementIds

        Returns:
            {"elements": [...], "layers": {layer_id: layer}}
        """
        records = list(records or [])

        imported = [self._import_single(record) for record in records]
        elements = [element for element in imported if is_valid_element(element)]
        if len(elements) != len(imported):
            logger.debug(f"Dropped {len(imported) - len(elements)} of {len(imported)} imported elements failing validation")

        layers = self._import_layers(records)
        self._link_elements(elements, layers)

        logger.debug(f"Imported {len(elements)} elements and {len(layers)} layers from {len(records)} records")
        return {"elements": elements, "layers": layers}

    def _transform_input_value(self, field: _InputField, value: Any) -> Any:
        """
        Apply the custom or named reverse transform to a resolved source value.

        A custom transform may return MISSING to leave the destination unset
        on purpose.
        """
        value = copy.deepcopy(value)
        if field.custom_transform is not None:
            return field.custom_transform(value)
        if field.source.transform is not None:
            return apply_reverse_transform(field.source.transform, value)
        return value

    def _import_single(self, record: Any) -> Dict[str, Any]:
        element: Dict[str, Any] = {}
        attempted: Dict[str, Set[str]] = {}
        populated: Dict[str, Set[str]] = {}

        for field in self._element_fields:
            parent, _, child = field.destination.rpartition(".")
            if parent:
                attempted.setdefault(parent, set()).add(child)

            value = get_nested_value(record, field.source.path)
            if value is MISSING:
                continue

            # Only an unresolved source counts against the parent object
            if parent:
                populated.setdefault(parent, set()).add(child)

            try:
                value = self._transform_input_value(field, value)
                if value is not MISSING:
                    set_nested_value(element, field.destination, value)
            except Exception as e:
                logger.warning(f"Failed to process input mapping for '{field.source_mapping}': {e}", exc_info=True)

        # Nested groups are all-or-nothing: drop a parent object unless every
        # child mapped into it resolved on the source record
        for parent, children in attempted.items():
            if not children <= populated.get(parent, set()):
                delete_nested_value(element, parent)

        element["syncState"] = SYNC_STATE_SAVED
        return element

    def _import_layers(self, records: Sequence[Any]) -> Dict[str, LayerInfo]:
        if not self._layer_fields:
            return {}

        layers: Dict[str, LayerInfo] = {}
        skipped = 0
        duplicates = 0

        for record in records:
            layer_obj: Dict[str, Any] = {}
            for field in self._layer_fields:
                value = get_nested_value(record, field.source.path)
                if value is MISSING:
                    continue

                try:
                    value = self._transform_input_value(field, value)
                    if value is not MISSING:
                        set_nested_value(layer_obj, field.destination, value)
                except Exception as e:
                    logger.warning(f"Failed to process layer mapping for '{field.source_mapping}': {e}", exc_info=True)

            layer_id = layer_obj.get("id")
            if not isinstance(layer_id, str) or not layer_id.strip():
                skipped += 1
                logger.warning(f"Skipping record - no valid layer id. Extracted: {layer_id!r}")
                continue

            if layer_id in layers:
                duplicates += 1
                continue

            timestamp = now_ms()
            opacity = layer_obj.get("opacity")
            layer = dict(layer_obj)
            layer.update({
                "id": layer_id,
                "name": layer_obj.get("name") or f"{DEFAULT_LAYER_NAME_PREFIX} {len(layers) + 1}",
                "description": layer_obj.get("description") or "",
                "category": layer_obj.get("category") or "",
                "visibility": layer_obj.get("visibility") or DEFAULT_LAYER_VISIBILITY,
                "opacity": DEFAULT_LAYER_OPACITY if opacity is None else opacity,
                "zIndex": len(layers),
                "elementIds": [],
                "createdAt": layer_obj.get("createdAt") or timestamp,
                "updatedAt": layer_obj.get("updatedAt") or timestamp,
            })
            layers[layer_id] = layer  # type: ignore[assignment]

        valid_layers = {layer_id: layer for layer_id, layer in layers.items() if is_valid_layer(layer)}

        logger.debug(
            f"Layer import: {len(valid_layers)} valid, {len(layers) - len(valid_layers)} invalid, "
            f"{duplicates} duplicate records, {skipped} records without layer id"
        )
        return valid_layers

    def _link_elements(self, elements: Sequence[DrawingElement], layers: Dict[str, LayerInfo]) -> None:
        for element in elements:
            layer_id = element.get("layerId")
            if not layer_id:
                logger.warning(f"Element {element['id']} has no layerId assigned")
                continue

            layer = layers.get(layer_id)
            if layer is None:
                logger.warning(f"Element {element['id']} references non-existent layer: {layer_id}")
                continue

            if element["id"] not in layer["elementIds"]:
                layer["elementIds"].append(element["id"])
                layer["updatedAt"] = now_ms()
