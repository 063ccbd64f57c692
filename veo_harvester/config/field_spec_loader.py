"""
Control file loading.

A control file lists the fields to harvest, one per line, in output order:

    path[<TAB>default[<TAB>tag]]

Blank lines and lines starting with '!' are ignored. A path may start with one
of the mnemonics in ProcessingDefaults.PATH_PREFIX_ALIASES, in which case it
expands to one full element path per matching alias entry.
"""

import logging

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .processing_defaults import ProcessingDefaults
from ..exceptions import ConfigurationError
from ..models import FieldSpec, FieldSpecList


logger = logging.getLogger(__name__)


def expand_path_aliases(path: str,
                        aliases: Sequence[Tuple[str, str]] = ProcessingDefaults.PATH_PREFIX_ALIASES) -> List[str]:
    """
    Expand a control file path using the prefix alias table.

    Every alias whose mnemonic starts the path contributes one expanded path,
    in table order. A path using no alias is returned unchanged.

    Args:
        path: Path as written in the control file
        aliases: (mnemonic, canonical prefix) pairs

    Returns:
        List of equivalent full element paths
    """
    expanded = [prefix + path[len(mnemonic):] for mnemonic, prefix in aliases if path.startswith(mnemonic)]
    return expanded or [path]


def parse_field_spec_line(line: str, source: Optional[str] = None, line_number: Optional[int] = None) -> Optional[FieldSpec]:
    """
    Build a FieldSpec from one control file line.

    Returns:
        The FieldSpec, or None for blank and comment lines

    Raises:
        ConfigurationError: If the path is empty or no tag can be derived
    """
    line = line.strip()
    if not line or line.startswith(ProcessingDefaults.COMMENT_PREFIX):
        return None

    tokens = line.split(ProcessingDefaults.FIELD_SEPARATOR)
    path = tokens[0]
    if not path:
        raise ConfigurationError("Element path is empty", source, line_number)

    default = tokens[1] if len(tokens) > 1 else None
    tag = tokens[2] if len(tokens) > 2 and tokens[2] else None

    try:
        return FieldSpec(paths=expand_path_aliases(path), default=default, tag=tag)
    except ConfigurationError as e:
        raise ConfigurationError(str(e), source, line_number) from e


def build_field_spec_list(lines: Iterable[str], source: Optional[str] = None) -> FieldSpecList:
    """
    Build the ordered field list from control file lines.

    Args:
        lines: Control file lines (with or without line terminators)
        source: Name of the control file, used in error messages

    Returns:
        FieldSpecList in input order

    Raises:
        ConfigurationError: If any line is malformed
    """
    specs = []
    for line_number, line in enumerate(lines, 1):
        spec = parse_field_spec_line(line, source, line_number)
        if spec is not None:
            specs.append(spec)
            logger.debug(f"Looking for {list(spec.paths)} as '{spec.tag}'")
    return FieldSpecList(specs)


def load_field_spec_list(control_file: Union[str, Path]) -> FieldSpecList:
    """
    Read a control file into a FieldSpecList.

    Raises:
        ConfigurationError: If the file cannot be read, is malformed or names no fields
    """
    control_file = Path(control_file)
    if not control_file.is_file():
        raise ConfigurationError("Control file does not exist or is not a file", str(control_file))

    try:
        with control_file.open("r", encoding="utf-8") as fh:
            field_specs = build_field_spec_list(fh, source=str(control_file))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Failed reading control file: {e}", str(control_file)) from e

    if len(field_specs) == 0:
        raise ConfigurationError("Control file does not specify any fields", str(control_file))

    logger.info(f"Loaded {len(field_specs)} fields from {control_file}")
    return field_specs
