"""
Centralized Portuguese UI messages.
All user-facing text in Brazilian Portuguese for consistency.
"""

MESSAGES = {
    # Success messages
    'login_success': 'Bem-vindo(a), {name}',
    'logout_success': 'Sessão encerrada com sucesso',
    'accommodation_created': 'Acomodação criada com sucesso',
    'accommodation_updated': 'Acomodação atualizada com sucesso',
    'accommodation_deleted': 'Acomodação excluída',
    'accommodation_blocked': 'Acomodação bloqueada',
    'accommodation_unblocked': 'Acomodação desbloqueada',
    'period_created': 'Período criado com sucesso',
    'period_updated': 'Período atualizado com sucesso',
    'period_deleted': 'Período excluído',
    'period_duplicated': 'Período duplicado com sucesso',
    'price_created': 'Preço cadastrado com sucesso',
    'price_updated': 'Preço atualizado com sucesso',
    'price_deleted': 'Preço excluído',
    'prices_deleted': '{count} preços excluídos',
    'category_pricing_applied': 'Preços aplicados à categoria {category}',
    'category_pricing_partial': 'Preços aplicados parcialmente; verifique o log',
    'reservation_created': 'Reserva criada com sucesso',
    'reservation_updated': 'Reserva atualizada com sucesso',
    'reservation_deleted': 'Reserva excluída',
    'status_changed': 'Status alterado para {status}',
    'guest_created': 'Hóspede cadastrado com sucesso',
    'guest_updated': 'Hóspede atualizado com sucesso',
    'guest_deleted': 'Hóspede removido',
    'area_created': 'Área criada com sucesso',
    'area_updated': 'Área atualizada com sucesso',
    'area_deleted': 'Área excluída',
    'order_created': 'Ordem de serviço {number} criada',
    'order_updated': 'Ordem de serviço atualizada',
    'order_deleted': 'Ordem de serviço excluída',
    'settings_saved': 'Configurações salvas',
    'settings_reset': 'Configurações restauradas',

    # Error messages
    'invalid_credentials': 'Usuário ou senha incorretos',
    'login_required': 'Faça login para acessar este recurso',
    'not_found': 'Recurso não encontrado',
    'method_not_allowed': 'Método não permitido',
    'internal_error': 'Erro interno do servidor',
    'bad_request': 'Requisição inválida',
    'csrf_invalid': 'Token CSRF ausente ou expirado; obtenha um novo em /csrf-token',
    'data_required': 'Dados são obrigatórios',
    'date_required': 'A data é obrigatória',
    'invalid_date': 'Data inválida (use AAAA-MM-DD)',
    'accommodation_not_found': 'Acomodação não encontrada',
    'period_not_found': 'Período não encontrado',
    'price_not_found': 'Preço não encontrado',
    'reservation_not_found': 'Reserva não encontrada',
    'guest_not_found': 'Hóspede não encontrado',
    'area_not_found': 'Área não encontrada',
    'order_not_found': 'Ordem de serviço não encontrada',
    'minimum_stay_violation': 'Estadia mínima de {required} noites (solicitado: {requested})',
    'no_price_available': 'Não há preço cadastrado para esta estadia',
}
