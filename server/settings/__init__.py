"""Django settings for docuflow.

Settings are split into components and assembled with
django-split-settings. Deploy-time values come from the environment
(or a ``.env`` file) via python-decouple.
"""

from split_settings.tools import include

include(
    'components/common.py',
    'components/logging.py',
    'components/storages.py',
    'components/sharing.py',
)
