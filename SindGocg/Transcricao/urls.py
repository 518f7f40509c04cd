from django.urls import path
from . import views

app_name = 'Transcricao'

urlpatterns = [
    path('transcribe', views.transcribe, name='transcribe'),
    path('enhance-text', views.enhance_text, name='enhance_text'),
    path('get-openai-key', views.get_openai_key, name='get_openai_key'),
]
