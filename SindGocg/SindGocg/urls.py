from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    path('login/', include('login.urls')),
    # Endpoints de proxy da OpenAI (mesmos caminhos da versão serverless)
    path('api/', include('Transcricao.urls')),
    path('', include('Sindicancia.urls')),
]
