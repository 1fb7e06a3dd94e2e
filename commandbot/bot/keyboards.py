from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove

# Button label -> command it stands for
BUTTON_COMMANDS = {
    "📋 Tasks": "tasks",
    "📦 Orders": "orders",
    "🚀 Deploy": "deploy",
    "🤖 Nova AI": "nova",
    "🔑 License": "license",
    "📊 Stats": "stats",
    "⚙️ Automation": "automation",
    "💻 Terminal": "terminal",
    "📱 Dashboard": "dashboard",
    "🧩 MiniApps": "miniapps",
    "🛠️ Tools": "tools",
    "🏢 Command Center": "commandcenter",
    "📞 Contacto": "contacto",
    "💰 Precios": "precios",
    "❓ Help": "help",
    "⚡ Status": "status",
}

MAIN_MENU_LAYOUT = [
    ["📋 Tasks", "📦 Orders", "🚀 Deploy"],
    ["🤖 Nova AI", "🔑 License", "📊 Stats"],
    ["⚙️ Automation", "💻 Terminal", "📱 Dashboard"],
    ["🧩 MiniApps", "🛠️ Tools", "🏢 Command Center"],
    ["📞 Contacto", "💰 Precios"],
    ["❓ Help", "⚡ Status"],
]

main_menu = ReplyKeyboardMarkup(MAIN_MENU_LAYOUT, resize_keyboard=True, is_persistent=True)
remove_keyboard = ReplyKeyboardRemove()
