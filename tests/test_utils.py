#!/usr/bin/python
import unittest

from netstoragefs import utils

class PathPrefixTest(unittest.TestCase):
    '''Path normalization tests'''

    def test_strip_namespace(self):
        ''' separators around the cp code are removed '''
        self.assertEqual(utils.strip_namespace('/123456/'), '123456')
        self.assertEqual(utils.strip_namespace('\\123456'), '123456')
        self.assertEqual(utils.strip_namespace(123456), '123456')

    def test_path_prefix(self):
        ''' prefix is /cpcode/ '''
        self.assertEqual(utils.path_prefix('//123456'), '/123456/')

    def test_apply_path_prefix(self):
        ''' paths are appended to the prefix '''
        prefix = utils.path_prefix('123456')
        self.assertEqual(utils.apply_path_prefix(prefix, 'a/b.txt'), '/123456/a/b.txt')
        self.assertEqual(utils.apply_path_prefix(prefix, '/a/b.txt'), '/123456/a/b.txt')
        self.assertEqual(utils.apply_path_prefix(prefix, '\\/a'), '/123456/a')

    def test_apply_path_prefix_root(self):
        ''' empty path is the namespace root '''
        prefix = utils.path_prefix('123456')
        self.assertEqual(utils.apply_path_prefix(prefix, ''), '/123456/')
        self.assertEqual(utils.apply_path_prefix(prefix, None), '/123456/')
        self.assertEqual(utils.apply_path_prefix(prefix, '/'), '/123456/')

    def test_apply_path_prefix_never_doubles_separators(self):
        ''' the namespace shows once and there are no // '''
        for cpcode in ('123456', '/123456', '123456/', '\\/123456/\\'):
            prefix = utils.path_prefix(cpcode)
            for path in ('', '/', 'a', '//a//b', 'a/b/', '/a//b///c.txt'):
                physical = utils.apply_path_prefix(prefix, path)
                self.assertTrue(physical.startswith('/123456/'), physical)
                self.assertFalse(physical.startswith('//'), physical)
                self.assertEqual(physical.count('123456'), 1, physical)
                self.assertNotIn('//', physical)

    def test_join_path(self):
        ''' join parent and leaf '''
        self.assertEqual(utils.join_path('', 'a.txt'), 'a.txt')
        self.assertEqual(utils.join_path('dir/', 'a.txt'), 'dir/a.txt')
        self.assertEqual(utils.join_path('/dir', '/a.txt'), 'dir/a.txt')
        self.assertEqual(utils.join_path('dir', ''), 'dir')

    def test_parent_directories(self):
        ''' ancestors, closest first, without the root '''
        self.assertEqual(list(utils.parent_directories('a/b/c.txt')), ['a/b', 'a'])
        self.assertEqual(list(utils.parent_directories('/a/b/')), ['a'])
        self.assertEqual(list(utils.parent_directories('c.txt')), [])
        self.assertEqual(list(utils.parent_directories('')), [])

if __name__ == '__main__':
    unittest.main()
