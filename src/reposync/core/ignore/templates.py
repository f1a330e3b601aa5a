"""Built-in ignore-file templates, keyed by display name."""

TEMPLATES: dict[str, str] = {
    "Android / Kotlin": """\
# Android
.gradle/
.idea/
build/
app/build/
local.properties
*.iml
.DS_Store
captures/
.externalNativeBuild/
.cxx/""",
    "Python / AI": """\
# Python
__pycache__/
*.py[cod]
*$py.class

# Virtual Env
venv/
env/
.env

# AI / ML
*.ipynb_checkpoints
*.pt
*.pth
*.h5
models/
data/""",
    "Web / Node.js": """\
# Node
node_modules/
npm-debug.log
yarn-error.log

# Build
dist/
build/
.env
.DS_Store""",
    "Flutter": """\
# Flutter
.dart_tool/
.idea/
.pub/
build/
.packages
.flutter-plugins
.flutter-plugins-dependencies""",
    "Java": """\
# Java
*.class
*.log
*.jar
*.war
.idea/
*.iml""",
}
