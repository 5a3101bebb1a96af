"""The procedure table of the RenderMan call interface.

Every procedure a stage can receive is described once here by a
:class:`ProcSpec`. The rest of the package is driven from this table:

- :class:`ristream.ri.renderer.Renderer` grows one method per entry,
- :class:`ristream.ri.command.Command` checks arity against it,
- the RIB parser uses the argument kinds to read positional arguments,
- the RIB writer uses them to format values back.

Argument kinds
--------------
``int``/``float``/``bool``   scalars
``token``/``string``         text
``int[]``/``float[]``/``token[]``/``string[]``   variable-length arrays
``color``/``point``          fixed triples
``bound``                    six floats
``matrix``/``basis``         sixteen floats (``basis`` may also be a name)
``func``                     a callable or the name of a built-in one
``pointer``                  opaque data (a list of strings in RIB)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

ArgKind = Literal[
    "int",
    "float",
    "bool",
    "token",
    "string",
    "int[]",
    "float[]",
    "token[]",
    "string[]",
    "color",
    "point",
    "bound",
    "matrix",
    "basis",
    "func",
    "pointer",
]

# Number of values for kinds with a fixed size.
FIXED_SIZES: dict[str, int] = {
    "color": 3,
    "point": 3,
    "bound": 6,
    "matrix": 16,
    "basis": 16,
}

ARRAY_KINDS = frozenset({"int[]", "float[]", "token[]", "string[]"})
SCALAR_KINDS = frozenset({"int", "float", "bool"})
TEXT_KINDS = frozenset({"token", "string"})


@dataclass(frozen=True, slots=True)
class ProcSpec:
    """Description of one procedure.

    Attributes
    ----------
    name : str
        RenderMan name, e.g. ``"ArchiveBegin"``; also the RIB request name.
    method : str
        Method name on a ``Renderer``, e.g. ``"archive_begin"``.
    args : tuple[tuple[str, ArgKind], ...]
        Positional arguments in call order.
    has_params : bool
        Whether a trailing named parameter list is accepted.
    """

    name: str
    method: str
    args: tuple[tuple[str, ArgKind], ...]
    has_params: bool

    @property
    def arity(self) -> int:
        return len(self.args)

    @property
    def arg_names(self) -> tuple[str, ...]:
        return tuple(n for n, _ in self.args)

    @property
    def arg_kinds(self) -> tuple[ArgKind, ...]:
        return tuple(k for _, k in self.args)


def _snake(name: str) -> str:
    return re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", name).lower()


def _proc(
    name: str, args: str = "", params: bool = False, method: str | None = None
) -> ProcSpec:
    """Build a spec from ``"arg:kind arg:kind ..."``."""
    parsed: list[tuple[str, ArgKind]] = []
    for item in args.split():
        arg, kind = item.split(":")
        parsed.append((arg, kind))  # type: ignore[arg-type]
    return ProcSpec(
        name=name, method=method or _snake(name), args=tuple(parsed), has_params=params
    )


_TABLE: tuple[ProcSpec, ...] = (
    # Scope-sensitive procedures handled specially by the inline archive filter.
    _proc("ArchiveBegin", "name:token", params=True),
    _proc("ArchiveEnd"),
    _proc("ReadArchive", "name:token callback:func", params=True),
    _proc("ObjectBegin", "name:token"),
    _proc("ObjectEnd"),
    _proc("ObjectInstance", "name:string"),
    _proc("ArchiveRecord", "type:token string:string"),
    # Uniform procedures.
    _proc("Declare", "name:string declaration:string"),
    _proc("FrameBegin", "number:int"),
    _proc("FrameEnd"),
    _proc("WorldBegin"),
    _proc("WorldEnd"),
    _proc("IfBegin", "condition:string"),
    _proc("ElseIf", "condition:string"),
    _proc("Else", method="else_"),
    _proc("IfEnd"),
    _proc("Format", "xresolution:int yresolution:int pixelaspectratio:float"),
    _proc("FrameAspectRatio", "frameratio:float"),
    _proc("ScreenWindow", "left:float right:float bottom:float top:float"),
    _proc("CropWindow", "xmin:float xmax:float ymin:float ymax:float"),
    _proc("Projection", "name:token", params=True),
    _proc("Clipping", "cnear:float cfar:float"),
    _proc("ClippingPlane", "x:float y:float z:float nx:float ny:float nz:float"),
    _proc("DepthOfField", "fstop:float focallength:float focaldistance:float"),
    _proc("Shutter", "opentime:float closetime:float"),
    _proc("PixelVariance", "variance:float"),
    _proc("PixelSamples", "xsamples:float ysamples:float"),
    _proc("PixelFilter", "function:func xwidth:float ywidth:float"),
    _proc("Exposure", "gain:float gamma:float"),
    _proc("Imager", "name:token", params=True),
    _proc("Quantize", "type:token one:int min:int max:int ditheramplitude:float"),
    _proc("Display", "name:token type:token mode:token", params=True),
    _proc("Hider", "name:token", params=True),
    _proc("ColorSamples", "nRGB:float[] RGBn:float[]"),
    _proc("RelativeDetail", "relativedetail:float"),
    _proc("Option", "name:token", params=True),
    _proc("AttributeBegin"),
    _proc("AttributeEnd"),
    _proc("Color", "Cq:color"),
    _proc("Opacity", "Os:color"),
    _proc(
        "TextureCoordinates",
        "s1:float t1:float s2:float t2:float s3:float t3:float s4:float t4:float",
    ),
    _proc("LightSource", "shadername:token name:token", params=True),
    _proc("AreaLightSource", "shadername:token name:token", params=True),
    _proc("Illuminate", "name:token onoff:bool"),
    _proc("Surface", "name:token", params=True),
    _proc("Displacement", "name:token", params=True),
    _proc("Atmosphere", "name:token", params=True),
    _proc("Interior", "name:token", params=True),
    _proc("Exterior", "name:token", params=True),
    _proc("ShaderLayer", "type:token name:token layername:token", params=True),
    _proc(
        "ConnectShaderLayers",
        "type:token layer1:token variable1:token layer2:token variable2:token",
    ),
    _proc("ShadingRate", "size:float"),
    _proc("ShadingInterpolation", "type:token"),
    _proc("Matte", "onoff:bool"),
    _proc("Bound", "bound:bound"),
    _proc("Detail", "bound:bound"),
    _proc("DetailRange", "offlow:float onlow:float onhigh:float offhigh:float"),
    _proc("GeometricApproximation", "type:token value:float"),
    _proc("Orientation", "orientation:token"),
    _proc("ReverseOrientation"),
    _proc("Sides", "nsides:int"),
    _proc("Identity"),
    _proc("Transform", "transform:matrix"),
    _proc("ConcatTransform", "transform:matrix"),
    _proc("Perspective", "fov:float"),
    _proc("Translate", "dx:float dy:float dz:float"),
    _proc("Rotate", "angle:float dx:float dy:float dz:float"),
    _proc("Scale", "sx:float sy:float sz:float"),
    _proc(
        "Skew",
        "angle:float dx1:float dy1:float dz1:float dx2:float dy2:float dz2:float",
    ),
    _proc("CoordinateSystem", "space:token"),
    _proc("CoordSysTransform", "space:token"),
    _proc("TransformBegin"),
    _proc("TransformEnd"),
    _proc("Resource", "handle:token type:token", params=True),
    _proc("ResourceBegin"),
    _proc("ResourceEnd"),
    _proc("Attribute", "name:token", params=True),
    _proc("Polygon", params=True),
    _proc("GeneralPolygon", "nverts:int[]", params=True),
    _proc("PointsPolygons", "nverts:int[] verts:int[]", params=True),
    _proc("PointsGeneralPolygons", "nloops:int[] nverts:int[] verts:int[]", params=True),
    _proc("Basis", "ubasis:basis ustep:int vbasis:basis vstep:int"),
    _proc("Patch", "type:token", params=True),
    _proc(
        "PatchMesh",
        "type:token nu:int uwrap:token nv:int vwrap:token",
        params=True,
    ),
    _proc(
        "NuPatch",
        "nu:int uorder:int uknot:float[] umin:float umax:float "
        "nv:int vorder:int vknot:float[] vmin:float vmax:float",
        params=True,
    ),
    _proc(
        "TrimCurve",
        "ncurves:int[] order:int[] knot:float[] min:float[] max:float[] "
        "n:int[] u:float[] v:float[] w:float[]",
    ),
    _proc(
        "SubdivisionMesh",
        "scheme:token nvertices:int[] vertices:int[] tags:token[] "
        "nargs:int[] intargs:int[] floatargs:float[]",
        params=True,
    ),
    _proc("Sphere", "radius:float zmin:float zmax:float thetamax:float", params=True),
    _proc("Cone", "height:float radius:float thetamax:float", params=True),
    _proc("Cylinder", "radius:float zmin:float zmax:float thetamax:float", params=True),
    _proc("Hyperboloid", "point1:point point2:point thetamax:float", params=True),
    _proc("Paraboloid", "rmax:float zmin:float zmax:float thetamax:float", params=True),
    _proc("Disk", "height:float radius:float thetamax:float", params=True),
    _proc(
        "Torus",
        "majorrad:float minorrad:float phimin:float phimax:float thetamax:float",
        params=True,
    ),
    _proc("Points", params=True),
    _proc("Curves", "type:token nvertices:int[] wrap:token", params=True),
    _proc(
        "Blobby",
        "nleaf:int code:int[] floats:float[] strings:token[]",
        params=True,
    ),
    _proc("Procedural", "data:pointer bound:bound refineproc:func freeproc:func"),
    _proc("Geometry", "type:token", params=True),
    _proc("SolidBegin", "type:token"),
    _proc("SolidEnd"),
    _proc("MotionBegin", "times:float[]"),
    _proc("MotionEnd"),
    _proc(
        "MakeTexture",
        "imagefile:string texturefile:string swrap:token twrap:token "
        "filterfunc:func swidth:float twidth:float",
        params=True,
    ),
    _proc(
        "MakeLatLongEnvironment",
        "imagefile:string reflfile:string filterfunc:func swidth:float twidth:float",
        params=True,
    ),
    _proc(
        "MakeCubeFaceEnvironment",
        "px:string nx:string py:string ny:string pz:string nz:string "
        "reflfile:string fov:float filterfunc:func swidth:float twidth:float",
        params=True,
    ),
    _proc("MakeShadow", "picfile:string shadowfile:string", params=True),
    _proc("MakeOcclusion", "picfiles:string[] shadowfile:string", params=True),
    _proc("ErrorHandler", "handler:func"),
)

PROCEDURES: dict[str, ProcSpec] = {spec.name: spec for spec in _TABLE}

# Procedures whose handling in the inline archive filter is not the uniform
# record-or-forward rule.
SCOPE_PROCEDURES = frozenset(
    {"ArchiveBegin", "ArchiveEnd", "ReadArchive", "ObjectBegin", "ObjectEnd", "ObjectInstance"}
)


def procedure(name: str) -> ProcSpec:
    """Return the spec for ``name``; raise ``KeyError`` if unknown."""
    try:
        return PROCEDURES[name]
    except KeyError:
        raise KeyError(f"unknown procedure {name!r}") from None


__all__ = [
    "ARRAY_KINDS",
    "ArgKind",
    "FIXED_SIZES",
    "PROCEDURES",
    "ProcSpec",
    "SCALAR_KINDS",
    "SCOPE_PROCEDURES",
    "TEXT_KINDS",
    "procedure",
]
