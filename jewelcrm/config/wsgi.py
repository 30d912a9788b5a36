"""
WSGI config for the jewelcrm project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'jewelcrm.config.settings')

application = get_wsgi_application()
