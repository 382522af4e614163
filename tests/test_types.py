"""
Tests for types module.
"""
import unittest

from telepage.exceptions import ParseError
from telepage.types import (
    Account, ImageInfo, NodeElement, Page, PageList, PageViews,
    filter_attrs, node_from_json, node_to_json, nodes_from_json, nodes_to_json
)


class TestNodeElement(unittest.TestCase):
    def test_to_dict_omits_empty_fields(self):
        self.assertEqual(NodeElement('hr').to_dict(), {'tag': 'hr'})
        self.assertEqual(NodeElement('p', attrs={}, children=[]).to_dict(), {'tag': 'p'})

    def test_to_dict_key_order(self):
        node = NodeElement('a', attrs={'href': 'u'}, children=['x'])
        self.assertEqual(list(node.to_dict()), ['tag', 'attrs', 'children'])

    def test_equality_compares_tree(self):
        node = NodeElement('p', children=['a', NodeElement('b', children=['c'])])
        self.assertEqual(node, NodeElement('p', children=['a', NodeElement('b', children=['c'])]))
        self.assertNotEqual(node, NodeElement('p', children=['a']))

    def test_node_to_json_text(self):
        self.assertEqual(node_to_json("text"), "text")

    def test_node_to_json_rejects_other_types(self):
        with self.assertRaises(TypeError):
            node_to_json(42)


class TestFilterAttrs(unittest.TestCase):
    def test_keeps_href_src(self):
        self.assertEqual(
            filter_attrs({'href': 'a', 'src': 'b', 'id': 'c'}),
            {'href': 'a', 'src': 'b'}
        )

    def test_case_insensitive(self):
        self.assertEqual(filter_attrs({'HREF': 'a'}), {'href': 'a'})

    def test_nothing_left_is_none(self):
        self.assertIsNone(filter_attrs({'class': ['x']}))
        self.assertIsNone(filter_attrs(None))

    def test_none_value_becomes_empty(self):
        self.assertEqual(filter_attrs({'href': None}), {'href': ''})


class TestNodeJson(unittest.TestCase):
    def test_nodes_to_json_compact(self):
        nodes = [NodeElement('p', children=['Hello, world'])]
        self.assertEqual(nodes_to_json(nodes), '[{"tag":"p","children":["Hello, world"]}]')

    def test_nodes_to_json_mixed(self):
        nodes = ["a", NodeElement('br'), "b"]
        self.assertEqual(nodes_to_json(nodes), '["a",{"tag":"br"},"b"]')

    def test_nodes_to_json_empty(self):
        self.assertEqual(nodes_to_json([]), '[]')

    def test_node_from_json_nested(self):
        node = node_from_json({
            'tag': 'p',
            'children': ['a', {'tag': 'a', 'attrs': {'href': 'u', 'target': '_blank'}, 'children': ['l']}]
        })
        self.assertEqual(
            node,
            NodeElement('p', children=['a', NodeElement('a', attrs={'href': 'u'}, children=['l'])])
        )

    def test_node_from_json_invalid(self):
        for bad in (42, None, {'children': []}, {'tag': 'p', 'children': 'x'}, {'tag': 'p', 'attrs': []}):
            with self.assertRaises(ParseError):
                node_from_json(bad)

    def test_nodes_from_json_string(self):
        self.assertEqual(nodes_from_json('["x",{"tag":"hr"}]'), ['x', NodeElement('hr')])

    def test_nodes_from_json_invalid_json(self):
        with self.assertRaises(ParseError):
            nodes_from_json('[{"tag":')

    def test_nodes_from_json_not_a_list(self):
        with self.assertRaises(ParseError):
            nodes_from_json('{"tag":"p"}')


class TestAccount(unittest.TestCase):
    def test_from_dict(self):
        account = Account.from_dict({
            'short_name': 'Sandbox',
            'author_name': 'Anonymous',
            'author_url': '',
            'access_token': 'tok',
            'auth_url': 'https://edit.telegra.ph/auth/x',
            'unknown': 'ignored'
        })
        self.assertEqual(account.short_name, 'Sandbox')
        self.assertEqual(account.access_token, 'tok')
        self.assertIsNone(account.page_count)

    def test_from_dict_rejects_non_object(self):
        with self.assertRaises(ParseError):
            Account.from_dict(['x'])


class TestPage(unittest.TestCase):
    def test_from_dict_with_content(self):
        page = Page.from_dict({
            'path': 'Sample-Page-12-15',
            'url': 'https://telegra.ph/Sample-Page-12-15',
            'title': 'Sample Page',
            'description': 'Hello, world!',
            'author_name': 'Anonymous',
            'content': [{'tag': 'p', 'children': ['Hello, world!']}],
            'views': 42,
        })
        self.assertEqual(page.content, [NodeElement('p', children=['Hello, world!'])])
        self.assertEqual(page.views, 42)
        self.assertIsNone(page.can_edit)

    def test_from_dict_without_content(self):
        page = Page.from_dict({'path': 'p', 'url': 'u', 'title': 't'})
        self.assertIsNone(page.content)
        self.assertEqual(page.views, 0)

    def test_missing_required_fields(self):
        with self.assertRaises(ParseError) as ctx:
            Page.from_dict({'path': 'p'})
        self.assertIn('url', str(ctx.exception))


class TestPageList(unittest.TestCase):
    def test_from_dict(self):
        page_list = PageList.from_dict({
            'total_count': 2,
            'pages': [
                {'path': 'a', 'url': 'ua', 'title': 'A'},
                {'path': 'b', 'url': 'ub', 'title': 'B'},
            ]
        })
        self.assertEqual(page_list.total_count, 2)
        self.assertEqual([p.path for p in page_list.pages], ['a', 'b'])

    def test_empty(self):
        self.assertEqual(PageList.from_dict({}).pages, [])


class TestPageViewsAndImageInfo(unittest.TestCase):
    def test_page_views(self):
        self.assertEqual(PageViews.from_dict({'views': 7}).views, 7)

    def test_image_info_url(self):
        self.assertEqual(ImageInfo('/file/abc.jpg').url, 'https://telegra.ph/file/abc.jpg')
        self.assertEqual(ImageInfo('https://cdn/x.jpg').url, 'https://cdn/x.jpg')

    def test_image_info_requires_src(self):
        with self.assertRaises(ParseError):
            ImageInfo.from_dict({'path': 'x'})


if __name__ == '__main__':
    unittest.main()
