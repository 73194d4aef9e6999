from rentcar.routes.registration import registration_bp
from rentcar.routes.auth import auth_bp
from rentcar.routes.payment import payment_bp
from rentcar.routes.whatsapp import whatsapp_bp
from rentcar.routes.chatbot import chatbot_bp

def register_blueprints(app):
    """Register all app routes."""
    app.register_blueprint(registration_bp, url_prefix="/api")
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(payment_bp, url_prefix="/api")
    app.register_blueprint(whatsapp_bp, url_prefix="/api")
    app.register_blueprint(chatbot_bp, url_prefix="/api")
