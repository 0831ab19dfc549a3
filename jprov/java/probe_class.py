"""The ``JavaProbe`` helper class, written as JVM bytecode.

The probe is a tiny Java program that prints one ``JAVA_PROBE: <key> <value>``
line per system property and exits. Rather than shipping a compiled class, it
is emitted here as a class file targeting Java 1.1 (class format 45.3), which
every JVM can load and which needs no stack map frames.

Equivalent source, for each property::

    System.out.print("JAVA_PROBE: java.version ");
    System.out.println(System.getProperty("java.version", "unset"));
"""

from __future__ import annotations

import struct
from pathlib import Path

from jprov.platform.files import atomic_write_bytes

__all__ = [
    "PROBE_CLASS_NAME",
    "PROBE_PREFIX",
    "PROBE_PROPERTIES",
    "UNSET",
    "build_probe_class",
    "ensure_probe_classpath",
]

PROBE_CLASS_NAME = "JavaProbe"
PROBE_PREFIX = "JAVA_PROBE: "
UNSET = "unset"

PROBE_PROPERTIES = (
    "java.home",
    "java.version",
    "java.vendor",
    "java.runtime.name",
    "java.runtime.version",
    "java.vm.name",
    "java.vm.version",
    "java.vm.vendor",
    "os.arch",
)

_MAGIC = 0xCAFEBABE
_MINOR, _MAJOR = 3, 45

_ACC_PUBLIC = 0x0001
_ACC_STATIC = 0x0008
_ACC_SUPER = 0x0020

# constant pool tags
_UTF8 = 1
_CLASS = 7
_STRING = 8
_FIELDREF = 9
_METHODREF = 10
_NAME_AND_TYPE = 12

# opcodes
_ALOAD_0 = 0x2A
_LDC = 0x12
_LDC_W = 0x13
_RETURN = 0xB1
_GETSTATIC = 0xB2
_INVOKEVIRTUAL = 0xB6
_INVOKESPECIAL = 0xB7
_INVOKESTATIC = 0xB8


class _ConstantPool:
    """Deduplicating constant pool builder. Indices start at 1."""

    def __init__(self) -> None:
        self._entries: list[bytes] = []
        self._index: dict[tuple[object, ...], int] = {}

    def _add(self, key: tuple[object, ...], data: bytes) -> int:
        if key not in self._index:
            self._entries.append(data)
            self._index[key] = len(self._entries)
        return self._index[key]

    def utf8(self, value: str) -> int:
        raw = value.encode("utf-8")
        return self._add((_UTF8, value), struct.pack(">BH", _UTF8, len(raw)) + raw)

    def class_(self, name: str) -> int:
        return self._add((_CLASS, name), struct.pack(">BH", _CLASS, self.utf8(name)))

    def string(self, value: str) -> int:
        return self._add((_STRING, value), struct.pack(">BH", _STRING, self.utf8(value)))

    def name_and_type(self, name: str, descriptor: str) -> int:
        data = struct.pack(">BHH", _NAME_AND_TYPE, self.utf8(name), self.utf8(descriptor))
        return self._add((_NAME_AND_TYPE, name, descriptor), data)

    def _ref(self, tag: int, owner: str, name: str, descriptor: str) -> int:
        data = struct.pack(">BHH", tag, self.class_(owner), self.name_and_type(name, descriptor))
        return self._add((tag, owner, name, descriptor), data)

    def field_ref(self, owner: str, name: str, descriptor: str) -> int:
        return self._ref(_FIELDREF, owner, name, descriptor)

    def method_ref(self, owner: str, name: str, descriptor: str) -> int:
        return self._ref(_METHODREF, owner, name, descriptor)

    def to_bytes(self) -> bytes:
        return struct.pack(">H", len(self._entries) + 1) + b"".join(self._entries)


def _ldc(pool: _ConstantPool, value: str) -> bytes:
    index = pool.string(value)
    if index < 256:
        return struct.pack(">BB", _LDC, index)
    return struct.pack(">BH", _LDC_W, index)


def _method(
    pool: _ConstantPool,
    access: int,
    name: str,
    descriptor: str,
    code: bytes,
    max_stack: int,
    max_locals: int,
) -> bytes:
    attribute = struct.pack(">HHI", max_stack, max_locals, len(code)) + code + struct.pack(">HH", 0, 0)
    return (
        struct.pack(">HHHH", access, pool.utf8(name), pool.utf8(descriptor), 1)
        + struct.pack(">HI", pool.utf8("Code"), len(attribute))
        + attribute
    )


def build_probe_class(properties: tuple[str, ...] = PROBE_PROPERTIES) -> bytes:
    """Return the bytes of ``JavaProbe.class``."""
    pool = _ConstantPool()
    this_class = pool.class_(PROBE_CLASS_NAME)
    super_class = pool.class_("java/lang/Object")

    init_code = (
        bytes([_ALOAD_0])
        + struct.pack(">BH", _INVOKESPECIAL, pool.method_ref("java/lang/Object", "<init>", "()V"))
        + bytes([_RETURN])
    )

    out = pool.field_ref("java/lang/System", "out", "Ljava/io/PrintStream;")
    print_ = pool.method_ref("java/io/PrintStream", "print", "(Ljava/lang/String;)V")
    println = pool.method_ref("java/io/PrintStream", "println", "(Ljava/lang/String;)V")
    get_property = pool.method_ref(
        "java/lang/System",
        "getProperty",
        "(Ljava/lang/String;Ljava/lang/String;)Ljava/lang/String;",
    )

    main_code = b""
    for prop in properties:
        main_code += struct.pack(">BH", _GETSTATIC, out)
        main_code += _ldc(pool, f"{PROBE_PREFIX}{prop} ")
        main_code += struct.pack(">BH", _INVOKEVIRTUAL, print_)
        main_code += struct.pack(">BH", _GETSTATIC, out)
        main_code += _ldc(pool, prop)
        main_code += _ldc(pool, UNSET)
        main_code += struct.pack(">BH", _INVOKESTATIC, get_property)
        main_code += struct.pack(">BH", _INVOKEVIRTUAL, println)
    main_code += bytes([_RETURN])

    # methods reference pool entries, so they must be built before the pool is written
    methods = _method(pool, _ACC_PUBLIC, "<init>", "()V", init_code, 1, 1) + _method(
        pool, _ACC_PUBLIC | _ACC_STATIC, "main", "([Ljava/lang/String;)V", main_code, 3, 1
    )

    return (
        struct.pack(">IHH", _MAGIC, _MINOR, _MAJOR)
        + pool.to_bytes()
        + struct.pack(">HHHHH", _ACC_PUBLIC | _ACC_SUPER, this_class, super_class, 0, 0)
        + struct.pack(">H", 2)
        + methods
        + struct.pack(">H", 0)
    )


def ensure_probe_classpath(directory: Path) -> Path:
    """Make sure ``directory/JavaProbe.class`` exists and return ``directory``."""
    target = directory / f"{PROBE_CLASS_NAME}.class"
    data = build_probe_class()
    if not target.is_file() or target.read_bytes() != data:
        atomic_write_bytes(target, data)
    return directory
