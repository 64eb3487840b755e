from django.urls import path

from . import views

urlpatterns = [
    path('', views.home, name='home'),

    path('api/candidaturas/', views.api_list, name='api_candidaturas'),
    path('api/candidaturas/enviar/', views.api_enviar, name='api_candidatura_enviar'),
    path('api/candidaturas/estatisticas/', views.api_stats, name='api_candidaturas_estatisticas'),
    path('api/candidaturas/<int:candidatura_id>/', views.api_detail, name='api_candidatura_detalhe'),
    path('api/candidaturas/<int:candidatura_id>/status/', views.api_update_status, name='api_candidatura_status'),

    path('painel/', views.painel, name='painel'),
    path('painel/exportar/', views.exportar_excel, name='exportar_candidaturas'),
    path('painel/candidaturas/<int:candidatura_id>/', views.candidatura_detalhe, name='candidatura_detalhe'),
    path('painel/candidaturas/<int:candidatura_id>/status/', views.atualizar_status, name='atualizar_status'),
]
