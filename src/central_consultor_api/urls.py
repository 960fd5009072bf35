from django.contrib import admin
from django.urls import include, path
from django_prometheus import exports

from plugins.django_interface.views.link_views import short_code_redirect

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/',     include('plugins.django_interface.urls')),
    path('app/s/<str:code>', short_code_redirect, name='short-code-redirect'),
    path('metrics/', exports.ExportToDjangoView, name='metrics'),
]
