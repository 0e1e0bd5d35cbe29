"""Entry types shared by the codec tests."""

from dataclasses import InitVar, dataclass, field
from enum import Enum, IntEnum

from records_codec import column
from records_kernel.domain.kinds import Float32, Int8, Int32, UInt8, UInt16, UInt64


@dataclass
class Employee:
    age: int = 0  # no column: never encoded, never decoded
    name: str = column("name", default="")
    is_employee: bool = column("isEmployee", default=False)


@dataclass
class Person:
    age: int = column("age")
    name: str = column("name")
    is_employee: bool = column("isEmployee")


@dataclass
class AllKinds:
    i: int = column("i")
    i8: Int8 = column("i8")
    i32: Int32 = column("i32")
    u8: UInt8 = column("u8")
    u16: UInt16 = column("u16")
    u64: UInt64 = column("u64")
    f: float = column("f")
    f32: Float32 = column("f32")
    b: bool = column("b")
    s: str = column("s")
    skipped: int = 0


@dataclass
class Address:
    city: str = column("city")


@dataclass
class WithNested:
    name: str = column("name")
    address: Address = column("address")
    tags: list[str] = column("tags", default_factory=list)


@dataclass
class Single:
    a: str = column("a")


@dataclass
class NoColumns:
    x: int = 0
    y: str = ""


@dataclass
class Restricted:
    name: str = column("name", default="")
    _token: str = column("token", default="")
    computed: int = column("computed", init=False, default=7)


@dataclass(frozen=True)
class FrozenPoint:
    x: float = column("x")
    y: float = column("y")


class Color(IntEnum):
    RED = 1
    GREEN = 2


class Shape(str, Enum):
    CIRCLE = "circle"
    SQUARE = "square"


@dataclass
class Painted:
    color: Color = column("color")
    shape: Shape = column("shape")


@dataclass
class Tagged:
    code: str = field(metadata={"col": "code"}, default="")
    label: str = field(metadata={"csv": "label"}, default="")


@dataclass
class Gauge:
    reading: Float32 = column("reading")


@dataclass
class Deferred:
    name: str = column("name")
    late: int = column("late", init=False)  # set after construction, if ever


@dataclass
class Scaled:
    value: int = column("value")
    factor: InitVar[int]

    def __post_init__(self, factor):
        self.value *= factor


@dataclass
class OptionallyScaled:
    value: int = column("value")
    factor: InitVar[int] = 1

    def __post_init__(self, factor):
        self.value *= factor
