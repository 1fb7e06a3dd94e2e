BRAND = {
    "name": "STAYArta Unified Bot",
    "company": "STAYArta",
    "tagline": "Hack the Ordinary",
    "version": "2.0.0",
    "features": [
        "✨ Nova AI Integration",
        "📋 Task Management",
        "🚀 Deployment Control",
        "📦 Order Tracking",
        "🔑 License Validation",
        "📊 Analytics & Stats",
        "⚙️ Automation Hub",
    ],
}

WELCOME = (
    f"🤖 *{BRAND['name']}*\n\n"
    f"🏢 *{BRAND['company']}*\n"
    f"⭐ {BRAND['tagline']}\n\n"
    f"✨ *Version {BRAND['version']}*\n\n"
    "🎯 *Unified Features:*\n"
    + "\n".join(BRAND["features"])
    + "\n\nUse the menu below or type /help for commands:"
)

HELP = f"""📚 *{BRAND['name']} - Help*

*Project Management:*
/tasks - View TaskBoard status
/orders [status] - Track orders
/deploy [phase] - Deployment info

*AI & Intelligence:*
/nova <message> - Chat with Nova AI
/confirm - Confirm action
/cancel - Cancel action

*Licenses:*
/license <key> - Validate STL-Key
/validar <clave> - Validar licencia
/mylicenses - View your licenses
/licencias - Gestión de licencias

*Información:*
/servicios - Servicios STAYArta
/precios - Tabla de precios
/contacto - Contacto oficial
/registrar <email> - Vincular email

*Command Center:*
/automation - Automation Hub status
/dashboard - Dashboard resources
/commandcenter - Command Center resources
/terminal - SSH access info
/miniapps - MiniApps inventory
/tools - AI tools available

*System:*
/status - Bot status
/stats - Usage statistics
/menu - Show main menu
/ping - Ping services

Use buttons below for quick access!"""

MENU = "📱 Main Menu:"

NOVA_USAGE = (
    "🤖 *Nova AI Assistant*\n\n"
    "Usage: `/nova <your message>`\n\n"
    "Example: `/nova explain quantum computing`"
)

LICENSE_USAGE = (
    "🔑 *STL-Key Validator*\n\n"
    "Usage: `/license <STL-KEY>`\n\n"
    "Example: `/license STL-A3F2-8B1C-D4E5-9F7A`"
)

REGISTER_USAGE = "Uso: /registrar correo@dominio.com"
REGISTER_UNKNOWN_USER = "⚠️ No encontramos tu usuario. Envía /start y vuelve a intentarlo."

LICENSES_HELP = (
    "🔑 *Licencias STAYArta*\n\n"
    "• Usa /license <STL-KEY> para validar\n"
    "• Usa /validar <clave> como alias\n"
    "• Usa /mylicenses para ver tus licencias vinculadas\n"
)

SERVICES = (
    "🧩 *Servicios STAYArta*\n\n"
    "• NOVA IA & Automatización\n"
    "• Command Center\n"
    "• MiniApps & Integraciones\n"
    "• E‑commerce & Growth\n\n"
    "Más info: https://stayarta.com"
)

PRICES = (
    "💰 *Precios STAYArta*\n\n"
    "Consulta planes y opciones actualizadas en:\n"
    "https://stayarta.com"
)

# Confirmation flow
CONFIRMATION_REQUIRED = "Necesito confirmación antes de ejecutar: {reasons}.\nResponde /confirm o /cancel."
DEFAULT_REASON = "acción sensible"
NOTHING_PENDING = "No hay acciones pendientes para confirmar."
CONFIRMED_ACK = "Confirmación recibida. ¿Siguiente paso?"
CANCELLED = "Acción cancelada."
DONE = "Listo."

DB_NOT_CONFIGURED = "⚠️ Base de datos no configurada."
TECHNICAL_ERROR = "⚙️ Technical error. Please try again."


def contact(email, phone):
    return (
        "📞 *Contacto STAYArta*\n\n"
        f"Email: {email}\n"
        f"Tel: {phone}\n"
        "Web: https://stayarta.com"
    )


def format_uptime(seconds):
    seconds = int(seconds)
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"
