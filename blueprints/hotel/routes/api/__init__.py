"""
Hotel API routes package.
Split into smaller modules by entity for maintainability.
"""

from flask import Blueprint

# Create the API blueprint
api_bp = Blueprint('api', __name__)

# Import and register routes from submodules
from blueprints.hotel.routes.api import accommodations
from blueprints.hotel.routes.api import periods
from blueprints.hotel.routes.api import prices
from blueprints.hotel.routes.api import reservations
from blueprints.hotel.routes.api import guests
from blueprints.hotel.routes.api import occupancy
from blueprints.hotel.routes.api import search
from blueprints.hotel.routes.api import maintenance
from blueprints.hotel.routes.api import settings

# Register all route functions on the blueprint
accommodations.register_routes(api_bp)
periods.register_routes(api_bp)
prices.register_routes(api_bp)
reservations.register_routes(api_bp)
guests.register_routes(api_bp)
occupancy.register_routes(api_bp)
search.register_routes(api_bp)
maintenance.register_routes(api_bp)
settings.register_routes(api_bp)
