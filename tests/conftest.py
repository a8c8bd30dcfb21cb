"""Pytest fixtures for kicad-geometry tests."""

from pathlib import Path

import pytest

# Library definitions shared by the test schematics. Pin coordinates are
# in library space (Y up).
LIB_DEVICE_R = """
    (symbol "Device:R" (pin_numbers hide) (pin_names (offset 0)) (in_bom yes) (on_board yes)
      (property "Reference" "R" (at 2.032 0 90) (effects (font (size 1.27 1.27))))
      (property "Value" "R" (at 0 0 90) (effects (font (size 1.27 1.27))))
      (symbol "R_0_1"
        (rectangle (start -1.016 -2.54) (end 1.016 2.54)
          (stroke (width 0.254) (type default)) (fill (type none))))
      (symbol "R_1_1"
        (pin passive line (at 0 3.81 270) (length 1.27)
          (name "~" (effects (font (size 1.27 1.27))))
          (number "1" (effects (font (size 1.27 1.27)))))
        (pin passive line (at 0 -3.81 90) (length 1.27)
          (name "~" (effects (font (size 1.27 1.27))))
          (number "2" (effects (font (size 1.27 1.27)))))))
"""

LIB_DEVICE_C = """
    (symbol "Device:C" (pin_numbers hide) (pin_names (offset 0.254)) (in_bom yes) (on_board yes)
      (property "Reference" "C" (at 0.635 2.54 0) (effects (font (size 1.27 1.27)) (justify left)))
      (property "Value" "C" (at 0.635 -2.54 0) (effects (font (size 1.27 1.27)) (justify left)))
      (symbol "C_0_1"
        (polyline (pts (xy -2.032 -0.762) (xy 2.032 -0.762))
          (stroke (width 0.508) (type default)) (fill (type none)))
        (polyline (pts (xy -2.032 0.762) (xy 2.032 0.762))
          (stroke (width 0.508) (type default)) (fill (type none))))
      (symbol "C_1_1"
        (pin passive line (at 0 3.81 270) (length 2.794) (name "~") (number "1"))
        (pin passive line (at 0 -3.81 90) (length 2.794) (name "~") (number "2"))))
"""

LIB_DEVICE_POT = """
    (symbol "Device:R_Potentiometer" (pin_names (offset 1.016) hide) (in_bom yes) (on_board yes)
      (property "Reference" "RV" (at -4.445 0 90) (effects (font (size 1.27 1.27))))
      (property "Value" "R_Potentiometer" (at -2.54 0 90) (effects (font (size 1.27 1.27))))
      (symbol "R_Potentiometer_0_1"
        (rectangle (start 1.016 2.54) (end -1.016 -2.54)
          (stroke (width 0.254) (type default)) (fill (type none))))
      (symbol "R_Potentiometer_1_1"
        (pin passive line (at 0 3.81 270) (length 1.27) (name "1") (number "1"))
        (pin passive line (at 3.81 0 180) (length 1.27) (name "2") (number "2"))
        (pin passive line (at 0 -3.81 90) (length 1.27) (name "3") (number "3"))))
"""

LIB_LM2904 = """
    (symbol "Amplifier_Operational:LM2904" (pin_names (offset 0.127)) (in_bom yes) (on_board yes)
      (property "Reference" "U" (at 0 5.08 0) (effects (font (size 1.27 1.27)) (justify left)))
      (property "Value" "LM2904" (at 0 -5.08 0) (effects (font (size 1.27 1.27)) (justify left)))
      (symbol "LM2904_1_1"
        (polyline (pts (xy -5.08 5.08) (xy 5.08 0) (xy -5.08 -5.08) (xy -5.08 5.08))
          (stroke (width 0.254) (type default)) (fill (type background)))
        (pin output line (at 7.62 0 180) (length 2.54) (name "~") (number "1"))
        (pin input line (at -7.62 -2.54 0) (length 2.54) (name "-") (number "2"))
        (pin input line (at -7.62 2.54 0) (length 2.54) (name "+") (number "3")))
      (symbol "LM2904_2_1"
        (polyline (pts (xy -5.08 5.08) (xy 5.08 0) (xy -5.08 -5.08) (xy -5.08 5.08))
          (stroke (width 0.254) (type default)) (fill (type background)))
        (pin input line (at -7.62 2.54 0) (length 2.54) (name "+") (number "5"))
        (pin input line (at -7.62 -2.54 0) (length 2.54) (name "-") (number "6"))
        (pin output line (at 7.62 0 180) (length 2.54) (name "~") (number "7")))
      (symbol "LM2904_3_1"
        (pin power_in line (at -2.54 7.62 270) (length 3.81) (name "V+") (number "8"))
        (pin power_in line (at -2.54 -7.62 90) (length 3.81) (name "V-") (number "4"))))
"""

LIB_POWER = """
    (symbol "power:+15V" (power) (pin_names (offset 0)) (in_bom yes) (on_board yes)
      (property "Reference" "#PWR" (at 0 -3.81 0) (effects (font (size 1.27 1.27)) hide))
      (property "Value" "+15V" (at 0 3.556 0) (effects (font (size 1.27 1.27))))
      (symbol "+15V_0_1"
        (polyline (pts (xy -0.762 1.27) (xy 0 2.54) (xy 0.762 1.27))
          (stroke (width 0) (type default)) (fill (type none))))
      (symbol "+15V_1_1"
        (pin power_in line (at 0 0 90) (length 0) hide (name "+15V") (number "1"))))
    (symbol "power:GND" (power) (pin_names (offset 0)) (in_bom yes) (on_board yes)
      (property "Reference" "#PWR" (at 0 -6.35 0) (effects (font (size 1.27 1.27)) hide))
      (property "Value" "GND" (at 0 -3.81 0) (effects (font (size 1.27 1.27))))
      (symbol "GND_0_1"
        (polyline (pts (xy 0 0) (xy 0 -1.27) (xy 1.27 -1.27) (xy 0 -2.54) (xy -1.27 -1.27) (xy 0 -1.27))
          (stroke (width 0) (type default)) (fill (type none))))
      (symbol "GND_1_1"
        (pin power_in line (at 0 0 270) (length 0) hide (name "GND") (number "1"))))
"""

LIB_MOUNTING_HOLE = """
    (symbol "Mechanical:MountingHole_Pad" (pin_numbers hide) (pin_names (offset 1.016) hide)
      (in_bom yes) (on_board yes)
      (property "Reference" "H" (at 0 6.35 0) (effects (font (size 1.27 1.27))))
      (property "Value" "MountingHole_Pad" (at 0 4.445 0) (effects (font (size 1.27 1.27))))
      (symbol "MountingHole_Pad_0_1"
        (circle (center 0 1.27) (radius 1.27) (stroke (width 1.27) (type default)) (fill (type none))))
      (symbol "MountingHole_Pad_1_1"
        (pin input line (at 0 -2.54 90) (length 2.54) (name "1") (number "1"))))
"""


def _symbol(lib_id, ref, value, x, y, angle=0, unit=1, mirror=None, ref_hidden=False):
    mirror_node = f" (mirror {mirror})" if mirror else ""
    hide = " hide" if ref_hidden else ""
    return f"""
  (symbol (lib_id "{lib_id}") (at {x} {y} {angle}){mirror_node} (unit {unit})
    (in_bom yes) (on_board yes) (dnp no)
    (uuid "sym-{ref}-{unit}")
    (property "Reference" "{ref}" (at {x} {y - 5.08} 0)
      (effects (font (size 1.27 1.27)){hide}))
    (property "Value" "{value}" (at {x} {y + 5.08} 0)
      (effects (font (size 1.27 1.27))))
    (property "Footprint" "" (at {x} {y} 0)
      (effects (font (size 1.27 1.27)) hide))
  )"""


def _wire(x1, y1, x2, y2):
    return f"""
  (wire (pts (xy {x1} {y1}) (xy {x2} {y2}))
    (stroke (width 0) (type default)))"""


def _schematic(lib_symbols, body):
    return f"""(kicad_sch
  (version 20231120)
  (generator "eeschema")
  (generator_version "8.0")
  (uuid "10000000-0000-0000-0000-000000000001")
  (paper "A4")
  (lib_symbols{lib_symbols}
  )
{body}
)
"""


# An amplifier stage plus a divider feeding an opamp input, two power
# nets, labels, a no-connect and a mounting hole. Items are in document
# order; net names depend on it.
NETLIST_SCHEMATIC = _schematic(
    LIB_DEVICE_R + LIB_DEVICE_C + LIB_DEVICE_POT + LIB_LM2904 + LIB_POWER + LIB_MOUNTING_HOLE,
    "".join(
        [
            _symbol("Device:R", "R33", "10k", 195.58, 52.07, 90),
            _symbol("Amplifier_Operational:LM2904", "U7", "LM2904", 214.63, 49.53, unit=2),
            _symbol("Device:C", "C9", "100n", 210.82, 62.23, 270),
            _symbol("Device:R", "R36", "100k", 210.82, 69.85, 90),
            _symbol("Device:R", "R7", "10k", 81.28, 99.06),
            _symbol("Device:R", "R8", "10k", 81.28, 110.49),
            _symbol("Amplifier_Operational:LM2904", "U4", "LM2904", 96.52, 105.41, unit=1),
            _symbol("Device:R_Potentiometer", "RV3", "10k", 85.09, 95.25),
            _symbol("Amplifier_Operational:LM2904", "U7", "LM2904", 156.21, 156.21, unit=3),
            _symbol("power:+15V", "#PWR01", "+15V", 153.67, 148.59, ref_hidden=True),
            _symbol("power:GND", "#PWR02", "GND", 153.67, 163.83, ref_hidden=True),
            _symbol("power:+15V", "#PWR03", "+15V", 81.28, 95.25, ref_hidden=True),
            _symbol("power:GND", "#PWR04", "GND", 81.28, 114.3, ref_hidden=True),
            _symbol("Mechanical:MountingHole_Pad", "H1", "MountingHole_Pad", 20.32, 20.32),
            _wire(199.39, 52.07, 207.01, 52.07),
            _wire(207.01, 52.07, 207.01, 62.23),
            _wire(207.01, 62.23, 207.01, 69.85),
            _wire(214.63, 62.23, 214.63, 69.85),
            _wire(214.63, 62.23, 222.25, 62.23),
            _wire(222.25, 62.23, 222.25, 49.53),
            _wire(184.15, 52.07, 191.77, 52.07),
            _wire(81.28, 102.87, 81.28, 106.68),
            _wire(81.28, 102.87, 88.9, 102.87),
            _wire(88.9, 102.87, 88.9, 95.25),
            """
  (junction (at 214.63 62.23) (diameter 0) (color 0 0 0 0))
  (junction (at 81.28 102.87) (diameter 0) (color 0 0 0 0))
  (no_connect (at 207.01 46.99) (uuid "20000000-0000-0000-0000-000000000001"))
  (label "OUT" (at 222.25 49.53 0)
    (effects (font (size 1.27 1.27)) (justify left bottom))
    (uuid "20000000-0000-0000-0000-000000000002"))
  (global_label "IN" (shape input) (at 184.15 52.07 180)
    (effects (font (size 1.27 1.27)) (justify right))
    (uuid "20000000-0000-0000-0000-000000000003")
    (property "Intersheetrefs" "${INTERSHEET_REFS}" (at 0 0 0)
      (effects (font (size 1.27 1.27)) hide)))
  (text "Amplifier stage" (at 200.66 40.64 0)
    (effects (font (size 2.54 2.54)) (justify left bottom))
    (uuid "20000000-0000-0000-0000-000000000004"))
""",
        ]
    ),
)

# A dual opamp placed as three units (one mirrored), a second opamp
# rotated 180 degrees and a resistor rotated 90 degrees. No wires.
OPAMP_SCHEMATIC = _schematic(
    LIB_DEVICE_R + LIB_LM2904,
    "".join(
        [
            _symbol("Amplifier_Operational:LM2904", "U1", "LM2904", 93.98, 80.01, unit=1),
            _symbol(
                "Amplifier_Operational:LM2904", "U1", "LM2904", 93.98, 110.49, unit=2, mirror="x"
            ),
            _symbol("Amplifier_Operational:LM2904", "U1", "LM2904", 93.98, 140.97, unit=3),
            _symbol("Amplifier_Operational:LM2904", "U3", "LM2904", 149.86, 80.01, 180, unit=1),
            _symbol("Device:R", "R1", "4k7", 120.65, 80.01, 90),
        ]
    ),
)

SYMBOL_LIBRARY = """(kicad_symbol_lib
  (version 20231120)
  (generator "kicad_symbol_editor")
  (symbol "R_Small" (pin_numbers hide) (pin_names (offset 0.254) hide) (in_bom yes) (on_board yes)
    (property "Reference" "R" (at 0.762 0.508 0) (effects (font (size 1.27 1.27)) (justify left)))
    (property "Value" "R_Small" (at 0.762 -1.016 0) (effects (font (size 1.27 1.27)) (justify left)))
    (symbol "R_Small_0_1"
      (rectangle (start -0.762 1.778) (end 0.762 -1.778)
        (stroke (width 0.2032) (type default)) (fill (type none))))
    (symbol "R_Small_1_1"
      (pin passive line (at 0 2.54 270) (length 0.762) (name "~") (number "1"))
      (pin passive line (at 0 -2.54 90) (length 0.762) (name "~") (number "2"))))
)
"""

# Schematic whose only symbol comes from an external library
EXTERNAL_LIB_SCHEMATIC = _schematic(
    "",
    _symbol("Local:R_Small", "R5", "1k", 50.8, 50.8)
    + """
  (label "TOP" (at 50.8 48.26 0) (effects (font (size 1.27 1.27))))
""",
)


# Derived symbols carry only properties; units and pins come from the parent
AMP_LIBRARY = """(kicad_symbol_lib
  (version 20231120)
  (generator "kicad_symbol_editor")
  (symbol "LM2904" (pin_names (offset 0.127)) (in_bom yes) (on_board yes)
    (property "Reference" "U" (at 0 5.08 0) (effects (font (size 1.27 1.27)) (justify left)))
    (property "Value" "LM2904" (at 0 -5.08 0) (effects (font (size 1.27 1.27)) (justify left)))
    (symbol "LM2904_1_1"
      (polyline (pts (xy -5.08 5.08) (xy 5.08 0) (xy -5.08 -5.08) (xy -5.08 5.08))
        (stroke (width 0.254) (type default)) (fill (type background)))
      (pin output line (at 7.62 0 180) (length 2.54) (name "~") (number "1"))
      (pin input line (at -7.62 -2.54 0) (length 2.54) (name "-") (number "2"))
      (pin input line (at -7.62 2.54 0) (length 2.54) (name "+") (number "3")))
    (symbol "LM2904_3_1"
      (pin power_in line (at -2.54 7.62 270) (length 3.81) (name "V+") (number "8"))
      (pin power_in line (at -2.54 -7.62 90) (length 3.81) (name "V-") (number "4"))))
  (symbol "LM358" (extends "LM2904")
    (property "Reference" "U" (at 0 5.08 0) (effects (font (size 1.27 1.27)) (justify left)))
    (property "Value" "LM358" (at 0 -5.08 0) (effects (font (size 1.27 1.27)) (justify left))))
  (symbol "LM358_Clone" (extends "LM358")
    (property "Value" "LM358_Clone" (at 0 -5.08 0) (effects (font (size 1.27 1.27)))))
  (symbol "Orphan" (extends "Missing")
    (property "Value" "Orphan" (at 0 0 0) (effects (font (size 1.27 1.27)))))
)
"""

# An LM358 from the external Amp library with a label on its output
DERIVED_SYMBOL_SCHEMATIC = _schematic(
    "",
    _symbol("Amp:LM358", "U1", "LM358", 50.8, 50.8)
    + """
  (label "VOUT" (at 58.42 50.8 0) (effects (font (size 1.27 1.27))))
""",
)


class FixedMetrics:
    """Text measurement double: every glyph is ``size`` wide and ``size`` tall."""

    def __init__(self):
        self.calls = []

    def measure(self, text, face, size):
        self.calls.append((text, face, size))
        return len(text) * size, size


@pytest.fixture
def fixed_metrics() -> FixedMetrics:
    return FixedMetrics()


@pytest.fixture
def netlist_schematic(tmp_path: Path) -> Path:
    """Write the netlist test schematic and return its path."""
    path = tmp_path / "amplifier.kicad_sch"
    path.write_text(NETLIST_SCHEMATIC)
    return path


@pytest.fixture
def opamp_schematic(tmp_path: Path) -> Path:
    path = tmp_path / "opamp.kicad_sch"
    path.write_text(OPAMP_SCHEMATIC)
    return path


@pytest.fixture
def library_dir(tmp_path: Path) -> Path:
    """Directory with Local.kicad_sym and Amp.kicad_sym."""
    lib_dir = tmp_path / "libs"
    lib_dir.mkdir()
    (lib_dir / "Local.kicad_sym").write_text(SYMBOL_LIBRARY)
    (lib_dir / "Amp.kicad_sym").write_text(AMP_LIBRARY)
    return lib_dir


@pytest.fixture
def external_lib_schematic(tmp_path: Path) -> Path:
    path = tmp_path / "external.kicad_sch"
    path.write_text(EXTERNAL_LIB_SCHEMATIC)
    return path


@pytest.fixture
def derived_symbol_schematic(tmp_path: Path) -> Path:
    path = tmp_path / "derived.kicad_sch"
    path.write_text(DERIVED_SYMBOL_SCHEMATIC)
    return path
