"""WSGI entrypoint for the BI platform"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "biplatform.settings")

application = get_wsgi_application()
