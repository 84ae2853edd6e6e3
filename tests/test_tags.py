"""Tests for the tag model and the default-value registry."""

import unittest

from nbt_codec import Tag, TagType, TypeMismatch, UnknownType, ValueOutOfRange, create


class TestCreate(unittest.TestCase):
    def test_defaults(self):
        self.assertEqual(create(TagType.BYTE).value, 0)
        self.assertEqual(create(TagType.DOUBLE).value, 0.0)
        self.assertEqual(create(TagType.STRING).value, '')
        self.assertEqual(create(TagType.INT_ARRAY).value, [])
        self.assertEqual(create(TagType.COMPOUND).value, {})
        self.assertIsNone(create(TagType.END).value)

    def test_list_default_is_empty_of_end(self):
        tag = create(TagType.LIST)
        self.assertEqual(tag.value, [])
        self.assertEqual(tag.element_type, TagType.END)

    def test_accepts_raw_code(self):
        self.assertEqual(create(3).type, TagType.INT)

    def test_unknown_code(self):
        with self.assertRaises(UnknownType) as cm:
            create(13)
        self.assertEqual(cm.exception.code, 13)

    def test_fresh_instances(self):
        a = create(TagType.COMPOUND)
        b = create(TagType.COMPOUND)
        a.set('x', Tag.int(1))
        self.assertEqual(len(b), 0)


class TestCompound(unittest.TestCase):
    def test_overwrite_keeps_position(self):
        tag = Tag.compound()
        tag.set('a', Tag.int(1))
        tag.set('b', Tag.int(2))
        tag.set('c', Tag.int(3))
        tag.set('b', Tag.string('two'))
        self.assertEqual(list(tag.keys()), ['a', 'b', 'c'])
        self.assertEqual(tag['b'].value, 'two')

    def test_set_assigns_key(self):
        tag = Tag.compound()
        tag['name'] = Tag.string('x', key='other')
        self.assertEqual(tag['name'].key, 'name')

    def test_build_from_keyed_tags(self):
        tag = Tag.compound([Tag.int(1, key='a'), Tag.int(2, key='b')])
        self.assertEqual(list(tag.keys()), ['a', 'b'])
        self.assertIn('a', tag)
        self.assertIsNone(tag.get('missing'))

    def test_unkeyed_member_rejected(self):
        with self.assertRaises(ValueOutOfRange):
            Tag.compound([Tag.int(1)])

    def test_end_member_rejected(self):
        with self.assertRaises(ValueOutOfRange):
            Tag.compound().set('x', Tag(TagType.END))

    def test_equality_is_order_sensitive(self):
        a = Tag.compound({'x': Tag.int(1), 'y': Tag.int(2)})
        b = Tag.compound({'y': Tag.int(2), 'x': Tag.int(1)})
        self.assertNotEqual(a, b)


class TestList(unittest.TestCase):
    def test_first_append_fixes_element_type(self):
        tag = Tag.list()
        tag.append(Tag.short(1))
        self.assertEqual(tag.element_type, TagType.SHORT)

    def test_heterogeneous_append_rejected(self):
        tag = Tag.list(TagType.INT, [Tag.int(1)])
        with self.assertRaises(TypeMismatch) as cm:
            tag.append(Tag.long(2))
        self.assertEqual(cm.exception.expected, TagType.INT)
        self.assertEqual(cm.exception.actual, TagType.LONG)

    def test_elements_are_unkeyed(self):
        tag = Tag.list(TagType.STRING, [Tag.string('a', key='k')])
        self.assertIsNone(tag[0].key)

    def test_array_append(self):
        tag = Tag.int_array([1, 2])
        tag.append(3)
        self.assertEqual(list(tag), [1, 2, 3])

    def test_end_element_rejected(self):
        with self.assertRaises(ValueOutOfRange):
            Tag.list().append(Tag(TagType.END))


class TestScalars(unittest.TestCase):
    def test_float_rounded_to_single(self):
        self.assertEqual(Tag.float(0.1).value, 0.10000000149011612)
        self.assertEqual(Tag.float(0.1), Tag(TagType.FLOAT, 0.10000000149011612))

    def test_float_overflow(self):
        with self.assertRaises(ValueOutOfRange):
            Tag.float(1e300)

    def test_double_keeps_precision(self):
        self.assertEqual(Tag.double(0.1).value, 0.1)

    def test_byte_array_from_bytes_is_signed(self):
        self.assertEqual(Tag.byte_array(b'\x00\x7f\x80\xff').value, [0, 127, -128, -1])
        self.assertEqual(Tag.byte_array(bytearray(b'\x01')).value, [1])

    def test_deep_equality(self):
        def nest(depth):
            tag = Tag.compound(key='')
            inner = tag
            for _ in range(depth):
                child = Tag.compound()
                inner.set('a', child)
                inner = child
            return tag

        self.assertEqual(nest(2000), nest(2000))
        self.assertNotEqual(nest(2000), nest(1999))


if __name__ == '__main__':
    unittest.main()
