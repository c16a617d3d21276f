#!/usr/bin/python
import stat
import unittest
from xml.etree import ElementTree

from netstoragefs.metadata import parse_listing, handle_file_metadata, make_stat, guess_mimetype

LISTING = b'''<stat directory="/123456/dir">
<file type="file" name="a.txt" mtime="1500000000" size="5" md5="5d41402abc4b2a76b9719d911017c592"/>
<file type="dir" name="sub" mtime="1500000001"/>
<file type="symlink" name="link" mtime="1500000002" target="/123456/dir/a.txt"/>
</stat>'''

def node(**attributes):
    return ElementTree.Element('file', dict((k, str(v)) for k, v in attributes.items()))

class MetadataTest(unittest.TestCase):
    '''Metadata normalization tests'''

    def test_parse_listing(self):
        ''' directory attribute and file nodes '''
        directory, nodes = parse_listing(LISTING)
        self.assertEqual(directory, '/123456/dir')
        self.assertEqual([n.get('name') for n in nodes], ['a.txt', 'sub', 'link'])

    def test_parse_empty_listing(self):
        ''' empty directory '''
        directory, nodes = parse_listing(b'<stat directory="/123456/empty"/>')
        self.assertEqual(directory, '/123456/empty')
        self.assertEqual(nodes, [])

    def test_file(self):
        ''' file metadata '''
        _, nodes = parse_listing(LISTING)
        meta = handle_file_metadata('dir', nodes[0])
        self.assertEqual(meta['type'], 'file')
        self.assertEqual(meta['path'], 'dir/a.txt')
        self.assertEqual(meta['visibility'], 'public')
        self.assertEqual(meta['timestamp'], 1500000000)
        self.assertEqual(meta['size'], 5)
        self.assertEqual(meta['mimetype'], 'text/plain')
        self.assertEqual(meta['md5'], '5d41402abc4b2a76b9719d911017c592')
        self.assertEqual(meta['name'], 'a.txt')

    def test_dir(self):
        ''' directories have no mimetype '''
        _, nodes = parse_listing(LISTING)
        meta = handle_file_metadata('', nodes[1])
        self.assertEqual(meta['type'], 'dir')
        self.assertEqual(meta['path'], 'sub')
        self.assertNotIn('mimetype', meta)

    def test_extended_attributes(self):
        ''' extended attributes are passed through '''
        _, nodes = parse_listing(LISTING)
        meta = handle_file_metadata('dir', nodes[2])
        self.assertEqual(meta['target'], '/123456/dir/a.txt')

    def test_required_keys_win(self):
        ''' extended attributes can't shadow the required keys '''
        file_node = node(type='file', name='x.txt', mtime=10, path='/evil', visibility='private', timestamp='never')
        meta = handle_file_metadata('base', file_node)
        self.assertEqual(meta['path'], 'base/x.txt')
        self.assertEqual(meta['visibility'], 'public')
        self.assertEqual(meta['timestamp'], 10)
        self.assertEqual(meta['type'], 'file')

    def test_backend_mimetype(self):
        ''' a mimetype from the storage is kept '''
        meta = handle_file_metadata('', node(type='file', name='x.txt', mtime=1, mimetype='application/x-custom'))
        self.assertEqual(meta['mimetype'], 'application/x-custom')

    def test_mimetype_by_extension(self):
        ''' mimetype from the extension '''
        self.assertEqual(handle_file_metadata('', node(type='file', name='p.png', mtime=1))['mimetype'], 'image/png')
        self.assertEqual(guess_mimetype('noextension'), 'text/plain')
        self.assertEqual(guess_mimetype(''), 'text/plain')

    def test_missing_attributes(self):
        ''' a node with no attributes '''
        meta = handle_file_metadata('dir', node())
        self.assertEqual(meta['path'], 'dir')
        self.assertEqual(meta['timestamp'], None)
        self.assertEqual(meta['visibility'], 'public')

    def test_missing_node(self):
        ''' no node describes the base directory '''
        meta = handle_file_metadata('/dir/', None)
        self.assertEqual(meta, {'type': 'dir', 'path': 'dir', 'visibility': 'public', 'timestamp': None})

    def test_make_stat(self):
        ''' stat_result out of metadata '''
        st = make_stat({'type': 'file', 'timestamp': 1500000000, 'size': 5})
        self.assertTrue(stat.S_ISREG(st.st_mode))
        self.assertEqual(st.st_size, 5)
        self.assertEqual(st.st_mtime, 1500000000)
        st = make_stat({'type': 'dir'})
        self.assertTrue(stat.S_ISDIR(st.st_mode))
        self.assertEqual(st.st_size, 0)

if __name__ == '__main__':
    unittest.main()
