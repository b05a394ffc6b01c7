"""
Hotel blueprint initialization.
Assembles the JSON API modules into the main hotel blueprint.

Route logic lives in routes/api/:
- accommodations.py - Inventory and manual blocks
- periods.py / prices.py - Price periods, price entries, rates and quotes
- reservations.py - Reservation lifecycle
- guests.py - Guest registry
- occupancy.py - Occupancy grid and statistics
- search.py - Availability search and share text
- maintenance.py - Maintenance areas and orders
- settings.py - Runtime settings and copy config
"""

from flask import Blueprint

# Create main hotel blueprint
hotel_bp = Blueprint('hotel', __name__)

# =============================================================================
# REGISTER SUB-BLUEPRINTS
# =============================================================================

# API routes (all REST endpoints)
from blueprints.hotel.routes.api import api_bp
hotel_bp.register_blueprint(api_bp, url_prefix='/api')
