"""
cpihex.struct - packed little-endian binary records

(c) 2019--2024 Rob Hagemans
licence: https://opensource.org/licenses/MIT
"""

import ctypes
from types import SimpleNamespace

from .errors import UnexpectedEOF


# type strings
TYPES = {
    'byte': ctypes.c_uint8,
    'word': ctypes.c_uint16,
    'short': ctypes.c_int16,
    'dword': ctypes.c_uint32,
}


def _parse_type(atype):
    """Convert member type specification to ctypes base type or array."""
    if isinstance(atype, _WrappedCType):
        return atype._ctype
    try:
        return TYPES[atype]
    except KeyError:
        pass
    # fixed-length byte strings, e.g. '7s'
    if isinstance(atype, str) and atype.endswith('s') and atype[:-1].isdigit():
        return ctypes.c_char * int(atype[:-1])
    raise ValueError(f'Field type `{atype}` not understood')


class _WrappedCValue:
    """Wrapper for ctypes value."""

    @classmethod
    def from_cvalue(cls, cvalue, type):
        obj = cls()
        obj._cvalue = cvalue
        obj._type = type
        return obj

    def __bytes__(self):
        return bytes(self._cvalue)


class _WrappedCType:
    """Wrapper for ctypes type, factory for _WrappedCValue objects."""

    def __mul__(self, count):
        """Create an array."""
        return ArrayType(self, count)

    def from_cvalue(self, cvalue):
        """Instantiate a variable from a cvalue."""
        # pylint: disable=no-member
        return self._value_cls.from_cvalue(cvalue, self)

    def from_bytes(self, data, offset=0):
        """Instantiate a variable from a buffer."""
        if len(data) - offset < self.size:
            raise UnexpectedEOF(
                f'Record of {self.size} bytes at offset {offset} is cut off: '
                f'only {max(0, len(data) - offset)} bytes available.'
            )
        # pylint: disable=no-member
        return self.from_cvalue(self._ctype.from_buffer_copy(data, offset))

    def read_from(self, stream, offset=None):
        """Read a variable from the current or given position in a stream."""
        if offset is not None:
            stream.seek(offset)
        return self.from_bytes(stream.read(self.size))

    @property
    def size(self):
        # pylint: disable=no-member
        return ctypes.sizeof(self._ctype)


class ScalarType(_WrappedCType):
    """Little-endian scalar type. Used to define arrays."""

    def __init__(self, ctype):
        self._ctype = ctype.__ctype_le__


class StructValue(_WrappedCValue):
    """Wrapper for ctypes Structure."""

    def __getattr__(self, attr):
        if not attr.startswith('_'):
            value = getattr(self._cvalue, attr)
            if isinstance(value, ctypes.Array):
                wrapper = self._type.element_types[attr]
                return wrapper.from_cvalue(value)
            return value
        raise AttributeError(attr)

    @property
    def __dict__(self):
        return {
            _field: getattr(self, _field)
            for _field, *_ in self._cvalue._fields_
        }

    def __repr__(self):
        return type(self).__name__ + '({})'.format(
            ', '.join(
                f'{_fld}={_val}'
                for _fld, _val in vars(self).items()
            )
        )


class StructType(_WrappedCType):
    """
    Represent a packed little-endian structured type.

    mystruct = StructType(first='byte', second='word')
    s = mystruct(first=1, second=2)

    assert bytes(s) == b'\1\2\0'
    assert mystruct.from_bytes(b'\1\2\0').second == 2
    """

    _value_cls = StructValue

    def __init__(self, **description):
        """Create a structured type."""

        class _CStruct(ctypes.LittleEndianStructure):
            _fields_ = tuple(
                (_field, _parse_type(_type))
                for _field, _type in description.items()
            )
            _pack_ = 1
            _layout_ = 'ms'

        self._ctype = _CStruct
        self.element_types = description

    def __call__(self, **kwargs):
        """Instantiate a struct variable."""
        return self.from_cvalue(self._ctype(**kwargs))


class ArrayValue(_WrappedCValue):
    """Wrapper for ctypes arrays."""

    def __getitem__(self, item):
        return self._cvalue[item]

    def __iter__(self):
        return (self[_i] for _i in range(len(self)))

    def __len__(self):
        return len(self._cvalue)

    def __repr__(self):
        return type(self).__name__ + '({})'.format(
            ', '.join(str(_s) for _s in self)
        )


class ArrayType(_WrappedCType):
    """Wrapper for ctypes array type."""

    _value_cls = ArrayValue

    def __init__(self, element_type, count):
        self.count = count
        self.element_type = element_type
        self._ctype = element_type._ctype * count


def sizeof(wrapped):
    """Get size in bytes of a type or value."""
    if isinstance(wrapped, _WrappedCType):
        return wrapped.size
    return ctypes.sizeof(wrapped._cvalue)


little_endian = SimpleNamespace(
    Struct=StructType,
    uint8=ScalarType(ctypes.c_uint8),
    int16=ScalarType(ctypes.c_int16),
    uint32=ScalarType(ctypes.c_uint32),
)
