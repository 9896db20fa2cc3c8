"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "collections",
    "create-collection",
    "show-collection",
    "complete-collection",
    "delete-collection",
    "files",
    "show-file",
    "delete-file",
    "parts",
    "upload",
    "orders",
    "show-order",
    "create-order",
    "clear",
    "exit",
    "help",
]

STYLE = Style.from_dict(
    {
        "prompt": "#2E86DE bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[32m"
RESET = "\033[0m"

WELCOME_TITLE = "AAS CLI - archive files to disc"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "aas> "

SHIP_TO_FIELDS = ("recipient", "address1", "address2", "city", "state", "postal_code", "phone_number")

HELP_TEXT = """Available commands:
  collections                                   List collections
  create-collection [dvd_4_7G|blueray_25G]      Create a collection (default dvd_4_7G)
  show-collection <id>                          Show one collection
  complete-collection <id>                      Mark a collection complete (ready to burn)
  delete-collection <id>                        Delete a collection
  files <collection_id>                         List files in a collection
  show-file <collection_id> <file_id>           Show one file
  delete-file <collection_id> <file_id>         Delete a file
  parts <collection_id> <file_id>               List the parts of a chunked file
  upload <collection_id> <path>... [--prefix <dir>]
                                                Upload files; directories are walked recursively
  orders                                        List orders
  show-order <id>                               Show one order
  create-order <collection_id> <title> key=value... [--no-disc]
                                                Create a burn order; keys: recipient, address1,
                                                address2, city, state, postal_code, phone_number
  clear                                         Clear screen and redisplay welcome message
  help                                          Show this help
  exit                                          Exit REPL

Examples:
  create-collection blueray_25G
  upload 3f2a9c videos/ --prefix /family
  complete-collection 3f2a9c
  create-order 3f2a9c "Summer 2024" recipient="John Smith" address1="1 Main St." city="San Francisco" state=CA postal_code=94111 phone_number="(415) 555 1212\""""
