from django.urls import path
from . import views

app_name = 'Sindicancia'

urlpatterns = [
    # Páginas
    path('', views.dashboard, name='dashboard'),
    path('sindicancia/', views.inquiry, name='inquiry'),
    path('oitiva/', views.hearing, name='hearing'),
    path('realizar-oitiva/', views.realizar_oitiva, name='realizar_oitiva'),

    # JSON
    path('sindicancias/json/', views.sindicancias_json, name='sindicancias_json'),
    path('sindicancias/<str:inquiry_id>/oitivas/', views.oitivas_json, name='oitivas_json'),
    path('sindicancias/<str:inquiry_id>/oitivas/<str:hearing_id>/', views.oitiva_json, name='oitiva_json'),
    path('sindicancias/<str:inquiry_id>/oitivas/<str:hearing_id>/oficio/', views.upload_oficio, name='upload_oficio'),
    path('sindicancias/<str:inquiry_id>/oitivas/<str:hearing_id>/oficio/excluir/', views.excluir_oficio, name='excluir_oficio'),
    path('sindicancias/<str:inquiry_id>/oitivas/<str:hearing_id>/termo/', views.termo_json, name='termo_json'),
    path('sindicancias/<str:inquiry_id>/oitivas/<str:hearing_id>/termo/docx/', views.exportar_termo, name='exportar_termo'),
    path('oficios/progresso/<str:hearing_id>/', views.progresso_upload, name='progresso_upload'),
]
