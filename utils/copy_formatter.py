"""WhatsApp-style share text for search results."""


def _money(value: float) -> str:
    return f'R$ {value:.2f}'


def format_accommodation_text(result: dict, config: dict) -> str:
    """
    Render the share text of one search result.

    Args:
        result: Search result with 'accommodation', 'price_per_night',
            'total_price', 'nights', 'has_multiple_periods' and 'periods_count'
        config: Copy config (see models.copy_config.DEFAULT_COPY_CONFIG)

    Returns:
        Formatted text, or '' when the result has no accommodation
    """
    accommodation = result.get('accommodation')
    if not accommodation:
        return ''

    lines = []

    if config.get('include_name'):
        lines.append(f"*{accommodation['name']}*\n")

    if config.get('include_category'):
        lines.append(f"*Categoria:* {accommodation['category']}")

    if config.get('include_capacity'):
        lines.append(f"*Capacidade:* {accommodation['capacity']} pessoas")

    if config.get('include_category') or config.get('include_capacity'):
        lines.append('')

    if config.get('include_description') and accommodation.get('description'):
        lines.append(f"{accommodation['description']}\n")

    album_url = (accommodation.get('album_url') or '').strip()
    if config.get('include_album_url') and album_url:
        lines.append(f'*Álbum de fotos:* {album_url}\n')

    price = result.get('price_per_night') or 0
    nights = result.get('nights') or 0
    total = result.get('total_price')

    if price > 0:
        if config.get('include_price'):
            lines.append(f'*Valor da diária:* {_money(price)}')
            if result.get('has_multiple_periods'):
                lines.append(
                    f"*Observação:* O período solicitado compreende "
                    f"{result.get('periods_count') or 2} períodos tarifários diferentes. "
                    f"O valor da diária apresentado representa uma média."
                )

        if config.get('include_nights') and nights > 0:
            lines.append(f'*Número de diárias:* {nights}')

        if config.get('include_total') and nights > 0 and total is not None:
            lines.append(f'*Valor total:* {_money(total)}')

    return '\n'.join(lines).strip()


def generate_preview_text(config: dict) -> str:
    """Render the share text of a sample result, for previewing a config."""
    sample = {
        'accommodation': {
            'name': 'Apartamento Standard',
            'room_number': '101',
            'category': 'Standard',
            'capacity': 4,
            'description': (
                'Apartamento no _térreo_, perfeito para sua estadia. O espaço conta com:\n\n'
                '🛏️ Quarto com cama de casal\n❄️ Ar-condicionado\n📺 TV\n🚿 Banheiro privativo'
            ),
            'album_url': 'https://photos.example.com/album/101',
        },
        'price_per_night': 295.0,
        'total_price': 885.0,
        'nights': 3,
        'has_multiple_periods': False,
    }
    return format_accommodation_text(sample, config)
