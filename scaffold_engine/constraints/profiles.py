"""Canonical constraint profiles for every built-in archetype."""

from __future__ import annotations

from .models import (
    ArchitectureFlags,
    CapabilityRequirements,
    ComplianceFlags,
    Platform,
    ProjectConstraints,
    TechStack,
)

NX_MONOREPO = "nx-monorepo"
EXPO_MOBILE = "expo-mobile"
ELECTRON_DESKTOP = "electron-desktop"
NEXTJS_WEB = "nextjs-web"
NODE_BACKEND = "node-backend"
CHROME_EXTENSION = "chrome-extension"
VSCODE_EXTENSION = "vscode-extension"
CLI_TOOL = "cli-tool"
SHOPIFY_APP = "shopify-app"
DISCORD_BOT = "discord-bot"


DEFAULT_PROFILES: list[ProjectConstraints] = [
    ProjectConstraints(
        archetype=NX_MONOREPO,
        platforms=frozenset({Platform.WEB, Platform.MOBILE, Platform.DESKTOP}),
        tech_stack=TechStack(
            frontend=["React", "TypeScript", "Tailwind CSS"],
            backend=["Node.js", "Express", "Prisma"],
            database=["PostgreSQL", "SQLite"],
            deployment=["Vercel", "Netlify", "Docker"],
            testing=["Jest", "Playwright", "Cypress"],
            styling=["Tailwind CSS", "CSS Modules"],
            state_management=["Zustand", "React Context"],
            bundler=["Vite", "Webpack"],
            runtime=["Node.js", "Bun"],
        ),
        requirements=CapabilityRequirements(
            authentication=True, database=True, testing=True, cicd=True
        ),
        architecture=ArchitectureFlags(monorepo=True, spa=True, ssr=True),
        compliance=ComplianceFlags(accessibility=True, security=True, performance=True),
    ),
    ProjectConstraints(
        archetype=EXPO_MOBILE,
        platforms=frozenset({Platform.MOBILE}),
        tech_stack=TechStack(
            frontend=["React Native", "TypeScript", "Expo"],
            backend=["Meteor", "Supabase", "Firebase"],
            database=["SQLite", "Realm", "AsyncStorage"],
            deployment=["EAS Build", "App Store", "Google Play"],
            testing=["Jest", "Detox"],
            styling=["StyleSheet", "NativeWind", "Tamagui"],
            state_management=["Zustand", "Redux Toolkit", "React Context"],
            bundler=["Metro"],
            runtime=["Hermes", "JSC"],
        ),
        requirements=CapabilityRequirements(authentication=True, realtime=True, analytics=True),
        architecture=ArchitectureFlags(spa=True),
        compliance=ComplianceFlags(accessibility=True, performance=True),
    ),
    ProjectConstraints(
        archetype=ELECTRON_DESKTOP,
        platforms=frozenset({Platform.DESKTOP}),
        tech_stack=TechStack(
            frontend=["React", "TypeScript", "Electron"],
            backend=["Node.js", "SQLite"],
            database=["SQLite", "LevelDB"],
            deployment=["Electron Builder", "Auto Updater"],
            testing=["Jest", "Spectron"],
            styling=["CSS Modules", "Styled Components"],
            state_management=["Zustand", "Redux Toolkit"],
            bundler=["Webpack", "Vite"],
            runtime=["Electron", "Node.js"],
        ),
        requirements=CapabilityRequirements(authentication=False, database=True, testing=True),
        architecture=ArchitectureFlags(spa=True),
        compliance=ComplianceFlags(security=True, performance=True),
    ),
    ProjectConstraints(
        archetype=NEXTJS_WEB,
        platforms=frozenset({Platform.WEB}),
        tech_stack=TechStack(
            frontend=["React", "TypeScript", "Next.js"],
            backend=["Next.js API Routes", "tRPC"],
            database=["PostgreSQL", "Prisma", "PlanetScale"],
            deployment=["Vercel", "Netlify"],
            testing=["Jest", "Playwright"],
            styling=["Tailwind CSS", "CSS Modules"],
            state_management=["Zustand", "React Query"],
            bundler=["Next.js", "Turbopack"],
            runtime=["Node.js", "Edge Runtime"],
        ),
        requirements=CapabilityRequirements(
            authentication=True, database=True, testing=True, seo=True
        ),
        architecture=ArchitectureFlags(ssr=True, static=True),
        compliance=ComplianceFlags(accessibility=True, seo=True, performance=True),
    ),
    ProjectConstraints(
        archetype=NODE_BACKEND,
        platforms=frozenset({Platform.SERVER}),
        tech_stack=TechStack(
            backend=["Node.js", "Express", "Fastify", "tRPC"],
            database=["PostgreSQL", "MongoDB", "Redis"],
            deployment=["Docker", "Railway", "Fly.io"],
            testing=["Jest", "Supertest"],
            runtime=["Node.js", "Bun"],
        ),
        requirements=CapabilityRequirements(
            authentication=True, database=True, testing=True, monitoring=True
        ),
        architecture=ArchitectureFlags(microservices=True, serverless=True),
        compliance=ComplianceFlags(security=True, performance=True),
    ),
    ProjectConstraints(
        archetype=CHROME_EXTENSION,
        platforms=frozenset({Platform.WEB}),
        tech_stack=TechStack(
            frontend=["TypeScript", "React", "Vite"],
            backend=["Chrome APIs", "Storage API"],
            deployment=["Chrome Web Store"],
            testing=["Jest", "Playwright"],
            styling=["CSS Modules", "Tailwind CSS"],
            bundler=["Vite", "Webpack"],
            runtime=["Chrome Extension Runtime"],
        ),
        requirements=CapabilityRequirements(testing=True),
        architecture=ArchitectureFlags(spa=True),
        compliance=ComplianceFlags(security=True, performance=True),
    ),
    ProjectConstraints(
        archetype=VSCODE_EXTENSION,
        platforms=frozenset({Platform.DESKTOP}),
        tech_stack=TechStack(
            frontend=["TypeScript", "VS Code API"],
            backend=["Node.js", "Language Server Protocol"],
            deployment=["VS Code Marketplace"],
            testing=["Mocha", "VS Code Test Runner"],
            bundler=["Webpack", "esbuild"],
            runtime=["VS Code Extension Host"],
        ),
        requirements=CapabilityRequirements(testing=True),
        architecture=ArchitectureFlags(spa=False),
        compliance=ComplianceFlags(performance=True),
    ),
    ProjectConstraints(
        archetype=CLI_TOOL,
        platforms=frozenset({Platform.SERVER}),
        tech_stack=TechStack(
            backend=["Node.js", "TypeScript", "Commander.js"],
            deployment=["npm", "GitHub Releases"],
            testing=["Jest", "CLI Testing"],
            bundler=["esbuild", "pkg"],
            runtime=["Node.js", "Bun"],
        ),
        requirements=CapabilityRequirements(testing=True),
        architecture=ArchitectureFlags(spa=False),
        compliance=ComplianceFlags(performance=True),
    ),
    ProjectConstraints(
        archetype=SHOPIFY_APP,
        platforms=frozenset({Platform.WEB}),
        tech_stack=TechStack(
            frontend=["React", "Shopify Polaris", "TypeScript"],
            backend=["Node.js", "Shopify CLI", "GraphQL"],
            database=["PostgreSQL", "Shopify Admin API"],
            deployment=["Shopify Partners", "Vercel"],
            testing=["Jest", "Shopify Testing"],
            styling=["Shopify Polaris"],
            runtime=["Node.js"],
        ),
        requirements=CapabilityRequirements(authentication=True, database=True, testing=True),
        architecture=ArchitectureFlags(spa=True),
        compliance=ComplianceFlags(security=True, performance=True),
    ),
    ProjectConstraints(
        archetype=DISCORD_BOT,
        platforms=frozenset({Platform.SERVER}),
        tech_stack=TechStack(
            backend=["Node.js", "Discord.js", "TypeScript"],
            database=["SQLite", "PostgreSQL"],
            deployment=["Railway", "Heroku", "Docker"],
            testing=["Jest"],
            runtime=["Node.js"],
        ),
        requirements=CapabilityRequirements(database=True, testing=True),
        architecture=ArchitectureFlags(spa=False),
        compliance=ComplianceFlags(security=True),
    ),
]
