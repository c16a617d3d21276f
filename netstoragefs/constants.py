version = '0.1.0'

default_config_file = '/etc/netstoragefs.conf'
default_scheme = 'https'
default_timeout = 60

# FileStore protocol
acs_action_header = 'X-Akamai-ACS-Action'
acs_api_version = 1
# actions answering with a XML document
xml_actions = ('dir', 'download', 'du', 'stat')

default_mimetype = 'text/plain'
