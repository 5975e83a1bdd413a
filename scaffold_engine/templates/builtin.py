"""Built-in generation templates.

Every template here pairs with a canonical constraint profile from
``scaffold_engine.constraints.profiles``.  Source files are rendered from the
Jinja2 files under ``templates/content/``; JSON configuration files are built
as dictionaries and serialized with ``json_content``.
"""

from __future__ import annotations

from typing import Any

from scaffold_engine.constraints import (
    CHROME_EXTENSION,
    CLI_TOOL,
    DISCORD_BOT,
    ELECTRON_DESKTOP,
    EXPO_MOBILE,
    NX_MONOREPO,
    SHOPIFY_APP,
    VSCODE_EXTENSION,
    ConstraintRegistry,
)

from .models import (
    BuildSuccessRule,
    CommandSuccessRule,
    DependencyKind,
    FileExistsRule,
    GenerationContext,
    GenerationTemplate,
    LintPassRule,
    TemplateCommand,
    TemplateDependency,
    TemplateFile,
)
from .registry import TemplateRegistry
from .renderer import jinja_content, json_content

DEV = DependencyKind.DEV


# ---------------------------------------------------------------------------
# Shared JSON builders
# ---------------------------------------------------------------------------

def _declared(ctx: GenerationContext, kind: DependencyKind) -> dict[str, str]:
    """Map the context template's dependencies of *kind* to ``name: version``."""
    return {
        dep.name: dep.version or "*"
        for dep in ctx.template.dependencies
        if dep.kind is kind
    }


def _package_json(ctx: GenerationContext, **fields: Any) -> dict[str, Any]:
    package: dict[str, Any] = {"name": ctx.project_slug, "version": "1.0.0"}
    package.update(fields)
    dependencies = _declared(ctx, DependencyKind.REGULAR)
    dev_dependencies = _declared(ctx, DependencyKind.DEV)
    if dependencies:
        package["dependencies"] = dependencies
    if dev_dependencies:
        package["devDependencies"] = dev_dependencies
    return package


# ---------------------------------------------------------------------------
# Nx full-stack monorepo
# ---------------------------------------------------------------------------

def _nx_config(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "$schema": "./node_modules/nx/schemas/nx-schema.json",
        "defaultBase": "main",
        "namedInputs": {
            "default": ["{projectRoot}/**/*", "sharedGlobals"],
            "production": ["default"],
            "sharedGlobals": [],
        },
        "targetDefaults": {
            "build": {"dependsOn": ["^build"], "inputs": ["production", "^production"]},
        },
        "generators": {
            "@nx/react": {
                "application": {"style": "css", "linter": "eslint", "bundler": "vite"},
                "component": {"style": "css"},
                "library": {"style": "css", "linter": "eslint"},
            },
        },
    }


def _nx_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        private=True,
        scripts={
            "build": "nx build",
            "test": "nx test",
            "lint": "nx lint",
            "serve": "nx serve",
            "dev": "nx serve web",
            "dev:mobile": "nx serve mobile",
            "dev:desktop": "nx serve desktop",
            "build:all": "nx run-many --target=build --all",
        },
    )


def _nx_tsconfig(ctx: GenerationContext) -> dict[str, Any]:
    scope = f"@{ctx.project_slug}"
    return {
        "compileOnSave": False,
        "compilerOptions": {
            "rootDir": ".",
            "sourceMap": True,
            "declaration": False,
            "moduleResolution": "node",
            "emitDecoratorMetadata": True,
            "experimentalDecorators": True,
            "importHelpers": True,
            "target": "es2015",
            "module": "esnext",
            "lib": ["es2020", "dom"],
            "skipLibCheck": True,
            "skipDefaultLibCheck": True,
            "baseUrl": ".",
            "paths": {
                f"{scope}/{lib}": [f"libs/{lib}/src/index.ts"]
                for lib in ("shared-ui", "shared-types", "shared-business-logic")
            },
        },
        "exclude": ["node_modules", "tmp"],
    }


def nx_monorepo_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="nx-monorepo-full-stack",
        name="Nx Full-Stack Monorepo",
        description="Complete Nx monorepo with web, mobile, and desktop apps",
        archetype=NX_MONOREPO,
        constraints=constraints.get(NX_MONOREPO),
        files=[
            TemplateFile("nx.json", json_content(_nx_config)),
            TemplateFile("package.json", json_content(_nx_package)),
            TemplateFile("tsconfig.base.json", json_content(_nx_tsconfig)),
            TemplateFile("apps/web/src/app/page.tsx", jinja_content("nx/page.tsx.j2")),
            TemplateFile("apps/mobile/App.tsx", jinja_content("expo/App.tsx.j2")),
            TemplateFile("apps/desktop/src/main.ts", jinja_content("electron/main.ts.j2")),
            TemplateFile("libs/shared-ui/src/index.ts", jinja_content("nx/shared-ui.ts.j2")),
            TemplateFile("libs/shared-types/src/index.ts", jinja_content("nx/shared-types.ts.j2")),
            TemplateFile(
                "libs/shared-business-logic/src/index.ts",
                jinja_content("nx/business-logic.ts.j2"),
            ),
        ],
        commands=[
            TemplateCommand(
                "npx create-nx-workspace {{project_name}} --preset=react-ts --appName=web "
                "--style=css --defaultBase=main --no-interactive",
                "Initialize Nx workspace",
            ),
            TemplateCommand("nx g @nx/expo:app mobile --no-interactive", "Generate Expo mobile app"),
            TemplateCommand("nx g @nx/js:lib shared-ui --no-interactive", "Generate shared UI library"),
            TemplateCommand(
                "nx g @nx/js:lib shared-types --no-interactive", "Generate shared types library"
            ),
            TemplateCommand(
                "nx g @nx/js:lib shared-business-logic --no-interactive",
                "Generate shared business logic library",
            ),
            TemplateCommand("npm install", "Install dependencies"),
        ],
        dependencies=[
            TemplateDependency("nx", "^21.0.0", DEV),
            TemplateDependency("@nx/react", "^21.0.0", DEV),
            TemplateDependency("@nx/expo", "^21.0.0", DEV),
            TemplateDependency("@nx/next", "^21.0.0", DEV),
            TemplateDependency("react", "^18.0.0"),
            TemplateDependency("react-dom", "^18.0.0"),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("tailwindcss", "^3.0.0", DEV),
        ],
        validation=[
            FileExistsRule(("nx.json", "package.json"), "Nx configuration exists"),
            BuildSuccessRule("nx build web", "Project builds successfully"),
            LintPassRule("nx lint", "Code passes linting"),
        ],
    )


# ---------------------------------------------------------------------------
# Expo mobile app
# ---------------------------------------------------------------------------

def _expo_config(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "expo": {
            "name": ctx.project_name,
            "slug": ctx.project_slug,
            "version": "1.0.0",
            "orientation": "portrait",
            "icon": "./assets/icon.png",
            "userInterfaceStyle": "light",
            "splash": {
                "image": "./assets/splash.png",
                "resizeMode": "contain",
                "backgroundColor": "#ffffff",
            },
            "assetBundlePatterns": ["**/*"],
            "ios": {"supportsTablet": True},
            "android": {
                "adaptiveIcon": {
                    "foregroundImage": "./assets/adaptive-icon.png",
                    "backgroundColor": "#ffffff",
                },
            },
            "web": {"favicon": "./assets/favicon.png"},
        }
    }


def expo_mobile_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="expo-mobile-app",
        name="Expo React Native App",
        description="Cross-platform mobile app with Expo and TypeScript",
        archetype=EXPO_MOBILE,
        constraints=constraints.get(EXPO_MOBILE),
        files=[
            TemplateFile("app.json", json_content(_expo_config)),
            TemplateFile("App.tsx", jinja_content("expo/App.tsx.j2")),
            TemplateFile(
                "src/screens/HomeScreen.tsx", jinja_content("expo/Screen.tsx.j2", screen_name="home")
            ),
            TemplateFile("src/navigation/AppNavigator.tsx", jinja_content("expo/AppNavigator.tsx.j2")),
        ],
        commands=[
            TemplateCommand(
                "npx create-expo-app {{project_name}} --template blank-typescript", "Create Expo app"
            ),
            TemplateCommand(
                "npm install @react-navigation/native @react-navigation/stack", "Install navigation"
            ),
            TemplateCommand(
                "npx expo install react-native-screens react-native-safe-area-context",
                "Install native dependencies",
            ),
        ],
        dependencies=[
            TemplateDependency("expo", "~51.0.0"),
            TemplateDependency("react", "18.2.0"),
            TemplateDependency("react-native", "0.74.5"),
            TemplateDependency("@react-navigation/native", "^6.0.0"),
            TemplateDependency("@react-navigation/stack", "^6.0.0"),
            TemplateDependency("typescript", "^5.0.0", DEV),
        ],
        validation=[
            FileExistsRule(("app.json", "App.tsx"), "Expo configuration exists"),
            CommandSuccessRule("npx expo export", "App builds for development"),
        ],
    )


# ---------------------------------------------------------------------------
# Electron desktop app
# ---------------------------------------------------------------------------

def _electron_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        description=f"{ctx.project_name} desktop application",
        main="dist/main/main.js",
        scripts={
            "start": "electron .",
            "dev": 'concurrently "npm run build:watch" "wait-on dist/main/main.js && electron ."',
            "build": "tsc",
            "build:watch": "tsc --watch",
            "pack": "electron-builder",
            "dist": "npm run build && electron-builder",
        },
    )


def electron_desktop_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="electron-desktop-app",
        name="Electron Desktop App",
        description="Cross-platform desktop app with Electron and React",
        archetype=ELECTRON_DESKTOP,
        constraints=constraints.get(ELECTRON_DESKTOP),
        files=[
            TemplateFile("src/main/main.ts", jinja_content("electron/main.ts.j2")),
            TemplateFile("src/renderer/App.tsx", jinja_content("electron/App.tsx.j2")),
            TemplateFile("src/preload/preload.ts", jinja_content("electron/preload.ts.j2")),
            TemplateFile("package.json", json_content(_electron_package)),
        ],
        commands=[
            TemplateCommand("npm init -y", "Initialize package.json"),
            TemplateCommand("npm install electron react react-dom", "Install core dependencies"),
            TemplateCommand(
                "npm install -D @types/react @types/react-dom typescript webpack",
                "Install dev dependencies",
            ),
        ],
        dependencies=[
            TemplateDependency("electron", "^28.0.0"),
            TemplateDependency("react", "^18.0.0"),
            TemplateDependency("react-dom", "^18.0.0"),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("@types/react", "^18.0.0", DEV),
            TemplateDependency("@types/react-dom", "^18.0.0", DEV),
            TemplateDependency("electron-builder", "^24.0.0", DEV),
            TemplateDependency("concurrently", "^8.0.0", DEV),
            TemplateDependency("wait-on", "^7.0.0", DEV),
        ],
        validation=[
            FileExistsRule(("src/main/main.ts",), "Electron main process exists"),
            BuildSuccessRule("npm run build", "App builds successfully"),
        ],
    )


# ---------------------------------------------------------------------------
# Chrome extension (Manifest V3)
# ---------------------------------------------------------------------------

def _chrome_manifest(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "manifest_version": 3,
        "name": ctx.project_name,
        "version": "1.0.0",
        "description": f"{ctx.project_name} Chrome Extension",
        "permissions": ["storage", "activeTab"],
        "action": {"default_popup": "popup.html", "default_title": ctx.project_name},
        "background": {"service_worker": "background.js"},
        "content_scripts": [{"matches": ["<all_urls>"], "js": ["content.js"]}],
    }


def _chrome_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        description=f"{ctx.project_name} Chrome Extension",
        scripts={"build": "vite build", "dev": "vite build --watch"},
    )


def _chrome_tsconfig(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "ES2020",
            "lib": ["ES2020", "DOM"],
            "module": "ESNext",
            "moduleResolution": "node",
            "strict": True,
            "jsx": "react-jsx",
            "types": ["chrome"],
        },
        "include": ["src/**/*"],
    }


def chrome_extension_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="chrome-extension-v3",
        name="Chrome Extension (Manifest V3)",
        description="Modern Chrome extension with TypeScript and React",
        archetype=CHROME_EXTENSION,
        constraints=constraints.get(CHROME_EXTENSION),
        files=[
            TemplateFile("manifest.json", json_content(_chrome_manifest)),
            TemplateFile("src/popup/popup.tsx", jinja_content("chrome/popup.tsx.j2")),
            TemplateFile("src/popup/popup.html", jinja_content("chrome/popup.html.j2")),
            TemplateFile("src/background/background.ts", jinja_content("chrome/background.ts.j2")),
            TemplateFile("src/content/content.ts", jinja_content("chrome/content.ts.j2")),
            TemplateFile("package.json", json_content(_chrome_package)),
            TemplateFile("vite.config.ts", jinja_content("chrome/vite.config.ts.j2")),
            TemplateFile("tsconfig.json", json_content(_chrome_tsconfig)),
        ],
        commands=[
            TemplateCommand("npm init -y", "Initialize package.json"),
            TemplateCommand(
                "npm install react react-dom @types/react @types/react-dom",
                "Install React dependencies",
            ),
            TemplateCommand(
                "npm install -D vite @vitejs/plugin-react typescript @types/chrome",
                "Install build tools",
            ),
            TemplateCommand("npm run build", "Build extension"),
        ],
        dependencies=[
            TemplateDependency("react", "^18.0.0"),
            TemplateDependency("react-dom", "^18.0.0"),
            TemplateDependency("@types/react", "^18.0.0", DEV),
            TemplateDependency("@types/react-dom", "^18.0.0", DEV),
            TemplateDependency("vite", "^5.0.0", DEV),
            TemplateDependency("@vitejs/plugin-react", "^4.0.0", DEV),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("@types/chrome", "^0.0.270", DEV),
        ],
        validation=[
            FileExistsRule(("manifest.json", "src/popup/popup.tsx"), "Extension files exist"),
            BuildSuccessRule("npm run build", "Extension builds successfully"),
        ],
    )


# ---------------------------------------------------------------------------
# VS Code extension
# ---------------------------------------------------------------------------

def _vscode_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        version="0.0.1",
        displayName=ctx.project_name,
        description=f"{ctx.project_name} VS Code Extension",
        engines={"vscode": "^1.80.0"},
        categories=["Other"],
        activationEvents=[],
        main="./out/extension.js",
        contributes={
            "commands": [{"command": f"{ctx.project_slug}.hello", "title": "Hello World"}],
        },
        scripts={"compile": "tsc -p ./", "watch": "tsc -watch -p ./"},
    )


def _vscode_tsconfig(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "compilerOptions": {
            "module": "commonjs",
            "target": "ES2020",
            "outDir": "out",
            "lib": ["ES2020"],
            "sourceMap": True,
            "rootDir": "src",
            "strict": True,
        },
        "exclude": ["node_modules", ".vscode-test"],
    }


def _vscode_launch(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "version": "0.2.0",
        "configurations": [
            {
                "name": "Extension",
                "type": "extensionHost",
                "request": "launch",
                "args": ["--extensionDevelopmentPath=${workspaceFolder}"],
                "outFiles": ["${workspaceFolder}/out/**/*.js"],
                "preLaunchTask": "${defaultBuildTask}",
            }
        ],
    }


def vscode_extension_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="vscode-extension-typescript",
        name="VS Code Extension (TypeScript)",
        description="VS Code extension with TypeScript and modern tooling",
        archetype=VSCODE_EXTENSION,
        constraints=constraints.get(VSCODE_EXTENSION),
        files=[
            TemplateFile("package.json", json_content(_vscode_package)),
            TemplateFile("src/extension.ts", jinja_content("vscode/extension.ts.j2")),
            TemplateFile("src/commands.ts", jinja_content("vscode/commands.ts.j2")),
            TemplateFile("tsconfig.json", json_content(_vscode_tsconfig)),
            TemplateFile(".vscode/launch.json", json_content(_vscode_launch)),
            TemplateFile("README.md", jinja_content("vscode/README.md.j2")),
        ],
        commands=[
            TemplateCommand("npm init -y", "Initialize package.json"),
            TemplateCommand(
                "npm install -D @types/vscode typescript @vscode/test-cli",
                "Install VS Code extension dependencies",
            ),
            TemplateCommand("npm run compile", "Compile extension"),
        ],
        dependencies=[
            TemplateDependency("@types/vscode", "^1.80.0", DEV),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("@vscode/test-cli", "^0.0.4", DEV),
        ],
        validation=[
            FileExistsRule(("package.json", "src/extension.ts"), "Extension files exist"),
            BuildSuccessRule("npm run compile", "Extension compiles successfully"),
        ],
    )


# ---------------------------------------------------------------------------
# CLI tool (Commander.js)
# ---------------------------------------------------------------------------

def _cli_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        description=f"{ctx.project_name} CLI Tool",
        main="dist/index.js",
        bin={ctx.project_slug: "./dist/index.js"},
        scripts={"build": "tsc", "start": "node dist/index.js", "dev": "ts-node src/index.ts"},
    )


def _node_tsconfig(ctx: GenerationContext) -> dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "ES2020",
            "module": "commonjs",
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist"],
    }


def cli_tool_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="cli-tool-commander",
        name="CLI Tool (Commander.js)",
        description="Command-line tool with TypeScript and Commander.js",
        archetype=CLI_TOOL,
        constraints=constraints.get(CLI_TOOL),
        files=[
            TemplateFile("src/index.ts", jinja_content("cli/index.ts.j2"), executable=True),
            TemplateFile(
                "src/commands/hello.ts", jinja_content("cli/command.ts.j2", command_name="hello")
            ),
            TemplateFile("package.json", json_content(_cli_package)),
            TemplateFile("tsconfig.json", json_content(_node_tsconfig)),
            TemplateFile("README.md", jinja_content("cli/README.md.j2")),
        ],
        commands=[
            TemplateCommand("npm init -y", "Initialize package.json"),
            TemplateCommand("npm install commander chalk inquirer", "Install CLI dependencies"),
            TemplateCommand(
                "npm install -D typescript @types/node ts-node", "Install development dependencies"
            ),
            TemplateCommand("npm run build", "Build CLI tool"),
        ],
        dependencies=[
            TemplateDependency("commander", "^11.0.0"),
            TemplateDependency("chalk", "^5.0.0"),
            TemplateDependency("inquirer", "^9.0.0"),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("@types/node", "^20.0.0", DEV),
            TemplateDependency("ts-node", "^10.0.0", DEV),
        ],
        validation=[
            FileExistsRule(("src/index.ts", "package.json"), "CLI files exist"),
            BuildSuccessRule("npm run build", "CLI builds successfully"),
        ],
    )


# ---------------------------------------------------------------------------
# Shopify app (Remix)
# ---------------------------------------------------------------------------

def _shopify_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        private=True,
        sideEffects=False,
        scripts={"build": "remix build", "dev": "shopify app dev", "start": "remix-serve build"},
    )


def shopify_app_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="shopify-app-remix",
        name="Shopify App (Remix)",
        description="Shopify app with Remix, Polaris, and GraphQL",
        archetype=SHOPIFY_APP,
        constraints=constraints.get(SHOPIFY_APP),
        files=[
            TemplateFile("app/root.tsx", jinja_content("shopify/root.tsx.j2")),
            TemplateFile("app/routes/_index.tsx", jinja_content("shopify/index.tsx.j2")),
            TemplateFile("app/shopify.server.ts", jinja_content("shopify/shopify.server.ts.j2")),
            TemplateFile("package.json", json_content(_shopify_package)),
            TemplateFile("shopify.app.toml", jinja_content("shopify/shopify.app.toml.j2")),
        ],
        commands=[
            TemplateCommand("npm create @shopify/app@latest", "Create Shopify app"),
            TemplateCommand("npm install", "Install dependencies"),
        ],
        dependencies=[
            TemplateDependency("@shopify/shopify-app-remix", "^2.0.0"),
            TemplateDependency("@shopify/polaris", "^12.0.0"),
            TemplateDependency("@remix-run/node", "^2.0.0"),
            TemplateDependency("@remix-run/react", "^2.0.0"),
            TemplateDependency("react", "^18.0.0"),
            TemplateDependency("react-dom", "^18.0.0"),
        ],
        validation=[
            FileExistsRule(("app/root.tsx", "shopify.app.toml"), "Shopify app files exist"),
        ],
    )


# ---------------------------------------------------------------------------
# Discord bot
# ---------------------------------------------------------------------------

_DISCORD_ENV_EXAMPLE = """\
# {{project_name}} Discord bot settings
DISCORD_TOKEN=your_bot_token_here
CLIENT_ID=your_client_id_here
GUILD_ID=your_guild_id_here
"""


def _discord_package(ctx: GenerationContext) -> dict[str, Any]:
    return _package_json(
        ctx,
        description=f"{ctx.project_name} Discord Bot",
        main="dist/index.js",
        scripts={"build": "tsc", "start": "node dist/index.js", "dev": "ts-node src/index.ts"},
    )


def discord_bot_template(constraints: ConstraintRegistry) -> GenerationTemplate:
    return GenerationTemplate(
        id="discord-bot-typescript",
        name="Discord Bot (TypeScript)",
        description="Discord bot with TypeScript and Discord.js",
        archetype=DISCORD_BOT,
        constraints=constraints.get(DISCORD_BOT),
        files=[
            TemplateFile("src/index.ts", jinja_content("discord/index.ts.j2")),
            TemplateFile(
                "src/commands/ping.ts", jinja_content("discord/command.ts.j2", command_name="ping")
            ),
            TemplateFile(
                "src/events/ready.ts", jinja_content("discord/event.ts.j2", event_name="ready")
            ),
            TemplateFile("package.json", json_content(_discord_package)),
            TemplateFile("tsconfig.json", json_content(_node_tsconfig)),
            TemplateFile(".env.example", _DISCORD_ENV_EXAMPLE, overwrite=False),
        ],
        commands=[
            TemplateCommand("npm init -y", "Initialize package.json"),
            TemplateCommand("npm install discord.js dotenv", "Install Discord.js"),
            TemplateCommand(
                "npm install -D typescript @types/node ts-node", "Install development dependencies"
            ),
        ],
        dependencies=[
            TemplateDependency("discord.js", "^14.0.0"),
            TemplateDependency("dotenv", "^16.0.0"),
            TemplateDependency("typescript", "^5.0.0", DEV),
            TemplateDependency("@types/node", "^20.0.0", DEV),
            TemplateDependency("ts-node", "^10.0.0", DEV),
        ],
        validation=[
            FileExistsRule(("src/index.ts", "package.json"), "Discord bot files exist"),
        ],
    )


# ---------------------------------------------------------------------------
# Registry factory
# ---------------------------------------------------------------------------

BUILTIN_TEMPLATE_FACTORIES = (
    nx_monorepo_template,
    expo_mobile_template,
    electron_desktop_template,
    chrome_extension_template,
    vscode_extension_template,
    cli_tool_template,
    shopify_app_template,
    discord_bot_template,
)


def builtin_templates(constraints: ConstraintRegistry) -> list[GenerationTemplate]:
    """Instantiate every built-in template whose archetype profile is registered."""
    templates = []
    for factory in BUILTIN_TEMPLATE_FACTORIES:
        template = factory(constraints)
        if template.constraints is not None:
            templates.append(template)
    return templates


def default_template_registry(constraints: ConstraintRegistry) -> TemplateRegistry:
    """Build a registry holding every built-in template, in a fixed order."""
    return TemplateRegistry(builtin_templates(constraints))
