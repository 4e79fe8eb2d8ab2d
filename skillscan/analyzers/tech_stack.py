"""Static technology lookup tables.

Three independent views of the same dependency names:

* The ``*_PATTERNS`` tables bucket an external package into frameworks,
  databases and libraries by substring (first match per table wins).
* ``TECH_GROUPS`` normalizes a package name to a technology label
  (exceptions first, then prefix groups in table order).
* ``TECH_STACK_MAP`` is the curated map behind the broader "detected
  technologies" list, matched by exact dependency name or by keyword.
"""
from __future__ import annotations

from .models import TechCategory

# ── Import signal tables (substring, first match per table) ────────

FRAMEWORK_PATTERNS: tuple[tuple[str, str], ...] = (
    ("react", "React"),
    ("vue", "Vue.js"),
    ("@angular", "Angular"),
    ("express", "Express.js"),
    ("fastify", "Fastify"),
    ("next", "Next.js"),
    ("nuxt", "Nuxt.js"),
    ("svelte", "Svelte"),
    ("django", "Django"),
    ("flask", "Flask"),
    ("fastapi", "FastAPI"),
)

DATABASE_PATTERNS: tuple[tuple[str, str], ...] = (
    ("mongoose", "MongoDB"),
    ("sequelize", "SQL/Sequelize"),
    ("prisma", "Prisma"),
    ("firebase", "Firebase"),
    ("mysql", "MySQL"),
    ("pg", "PostgreSQL"),
    ("redis", "Redis"),
    ("pymongo", "MongoDB"),
    ("sqlalchemy", "SQLAlchemy"),
)

LIBRARY_PATTERNS: tuple[tuple[str, str], ...] = (
    ("lodash", "Lodash"),
    ("axios", "Axios"),
    ("socket.io", "Socket.IO"),
    ("joi", "Validation"),
    ("yup", "Validation"),
    ("bcrypt", "Security"),
    ("jsonwebtoken", "JWT"),
    ("cors", "CORS"),
    ("typescript", "TypeScript"),
    ("eslint", "ESLint"),
    ("prettier", "Prettier"),
)

# ── Technology groups (normalize_tech) ─────────────────────────────

TECH_EXCEPTIONS: dict[str, str] = {
    "react-native": "React Native",
    "react-dom": "React",
    "next": "Next.js",
    "nuxt": "Nuxt.js",
    "vue": "Vue.js",
    "svelte": "Svelte",
    "express": "Express.js",
    "fastify": "Fastify",
    "koa": "Koa",
    "@nestjs/core": "NestJS",
    "mongoose": "MongoDB",
    "mongodb": "MongoDB",
    "pg": "PostgreSQL",
    "mysql": "MySQL",
    "mysql2": "MySQL",
    "redis": "Redis",
    "ioredis": "Redis",
    "sequelize": "Sequelize",
    "prisma": "Prisma",
    "@prisma/client": "Prisma",
    "firebase": "Firebase",
    "typescript": "TypeScript",
    "socket.io": "Socket.IO",
    "socket.io-client": "Socket.IO",
    "jsonwebtoken": "JWT",
    "lodash": "Lodash",
    "axios": "Axios",
    "joi": "Joi",
    "yup": "Yup",
    "jest": "Jest",
    "vitest": "Vitest",
    "cypress": "Cypress",
    "@playwright/test": "Playwright",
    "webpack": "Webpack",
    "vite": "Vite",
    "eslint": "ESLint",
    "prettier": "Prettier",
}

# Ordered: the first group with a matching prefix wins
TECH_GROUPS: dict[str, tuple[str, ...]] = {
    "React": ("react",),
    "Angular": ("@angular/",),
    "Vue.js": ("@vue/", "vue-"),
    "NestJS": ("@nestjs/",),
    "Testing Library": ("@testing-library/",),
    "ESLint": ("eslint-", "@eslint/", "@typescript-eslint/"),
    "Babel": ("@babel/", "babel-"),
    "Vite": ("@vitejs/", "vite-"),
    "Tailwind CSS": ("tailwindcss", "@tailwindcss/"),
    "Redux": ("redux", "@reduxjs/"),
    "Type Definitions": ("@types/",),
    "MUI": ("@mui/", "@material-ui/"),
    "Radix UI": ("@radix-ui/",),
    "Storybook": ("@storybook/",),
    "AWS SDK": ("aws-sdk", "@aws-sdk/"),
    "Firebase": ("@firebase/",),
    "Apollo": ("@apollo/",),
    "TanStack": ("@tanstack/",),
}

LABEL_CATEGORIES: dict[TechCategory, frozenset[str]] = {
    TechCategory.FRAMEWORK: frozenset({
        "React", "React Native", "Vue.js", "Angular", "Svelte", "Next.js",
        "Nuxt.js", "Express.js", "Fastify", "Koa", "NestJS",
    }),
    TechCategory.DATABASE: frozenset({
        "MongoDB", "PostgreSQL", "MySQL", "Redis", "Firebase", "Prisma",
        "Sequelize", "SQLite",
    }),
    TechCategory.TOOL: frozenset({
        "TypeScript", "ESLint", "Prettier", "Babel", "Vite", "Webpack",
        "Jest", "Vitest", "Cypress", "Playwright", "Testing Library",
        "Type Definitions", "Storybook",
    }),
}

# ── Curated technology map ─────────────────────────────────────────

TECH_STACK_MAP: dict[str, dict[str, tuple[str, ...]]] = {
    # Frontend frameworks & libraries
    "React": {"dependencies": ("react",)},
    "Vue.js": {"dependencies": ("vue",)},
    "Angular": {"dependencies": ("@angular/core", "angular")},
    "Svelte": {"dependencies": ("svelte",)},
    "Next.js": {"dependencies": ("next",)},
    "Nuxt": {"dependencies": ("nuxt",)},
    "Remix": {"dependencies": ("remix",)},
    "Preact": {"dependencies": ("preact",)},
    "SolidJS": {"dependencies": ("solid-js",)},
    "AlpineJS": {"dependencies": ("alpinejs",)},
    # Styling & UI
    "Tailwind CSS": {"dependencies": ("tailwindcss", "@tailwindcss/vite")},
    "Bootstrap": {"dependencies": ("bootstrap",)},
    "MUI": {"dependencies": ("@mui/material",)},
    "ChakraUI": {"dependencies": ("@chakra-ui/react",)},
    "SCSS": {"dependencies": ("sass",)},
    "AntDesign": {"dependencies": ("antd",)},
    "Emotion": {"dependencies": ("@emotion/react",)},
    "StyledComponents": {"dependencies": ("styled-components",)},
    "Bulma": {"dependencies": ("bulma",)},
    # State management
    "Redux": {"dependencies": ("redux", "@reduxjs/toolkit")},
    "Zustand": {"dependencies": ("zustand",)},
    "Recoil": {"dependencies": ("recoil",)},
    "Jotai": {"dependencies": ("jotai",)},
    "MobX": {"dependencies": ("mobx",)},
    "Effector": {"dependencies": ("effector",)},
    "XState": {"dependencies": ("xstate",)},
    # Backend frameworks
    "Express.js": {"dependencies": ("express",)},
    "Koa.js": {"dependencies": ("koa",)},
    "NestJS": {"dependencies": ("@nestjs/core",)},
    "Hapi": {"dependencies": ("@hapi/hapi",)},
    "Django": {"keywords": ("django",)},
    "Flask": {"keywords": ("flask",)},
    "FastAPI": {"keywords": ("fastapi",)},
    "SpringBoot": {"keywords": ("spring-boot",)},
    "Laravel": {"keywords": ("laravel",)},
    "RubyOnRails": {"keywords": ("rails",)},
    "ASPNet": {"keywords": ("asp.net",)},
    # Databases & ORMs
    "MongoDB": {"dependencies": ("mongoose",)},
    "PostgreSQL": {"dependencies": ("pg", "typeorm")},
    "MySQL": {"dependencies": ("mysql", "mysql2")},
    "SQLite": {"dependencies": ("sqlite3",)},
    "Prisma": {"dependencies": ("@prisma/client",)},
    "Sequelize": {"dependencies": ("sequelize",)},
    "Mongoose": {"dependencies": ("mongoose",)},
    "Redis": {"dependencies": ("redis",)},
    "Supabase": {"dependencies": ("@supabase/supabase-js",)},
    "CouchDB": {"keywords": ("couchdb",)},
    "DynamoDB": {"dependencies": ("aws-sdk",)},
    # Auth & security
    "Auth0": {"dependencies": ("@auth0/auth0-react",)},
    "Firebase": {"dependencies": ("firebase",)},
    "Passport": {"dependencies": ("passport",)},
    "Bcrypt": {"dependencies": ("bcrypt",)},
    "JWT": {"dependencies": ("jsonwebtoken",)},
    "Okta": {"dependencies": ("@okta/okta-auth-js",)},
    "Clerk": {"dependencies": ("@clerk/clerk-react",)},
    # API & networking
    "Axios": {"dependencies": ("axios",)},
    "GraphQL": {"dependencies": ("graphql",)},
    "Apollo": {"dependencies": ("@apollo/client",)},
    "tRPC": {"dependencies": ("@trpc/server",)},
    "SWR": {"dependencies": ("swr",)},
    "ReactQuery": {"dependencies": ("@tanstack/react-query",)},
    "RESTClient": {"dependencies": ("superagent",)},
    # Build tools
    "Webpack": {"dependencies": ("webpack",)},
    "Vite": {"dependencies": ("vite",)},
    "Rollup": {"dependencies": ("rollup",)},
    "Babel": {"dependencies": ("@babel/core",)},
    "TypeScript": {"dependencies": ("typescript",)},
    "ESLint": {"dependencies": ("eslint",)},
    "Prettier": {"dependencies": ("prettier",)},
    "Parcel": {"dependencies": ("parcel",)},
    "Turbopack": {"dependencies": ("@turbo/pack",)},
    "NX": {"dependencies": ("nx",)},
    # Testing
    "Jest": {"dependencies": ("jest",)},
    "Mocha": {"dependencies": ("mocha",)},
    "Cypress": {"dependencies": ("cypress",)},
    "Vitest": {"dependencies": ("vitest",)},
    "Playwright": {"dependencies": ("@playwright/test",)},
    "TestingLibrary": {"dependencies": ("@testing-library/react",)},
    "MSW": {"dependencies": ("msw",)},
    "pytest": {"keywords": ("pytest",)},
    # Realtime
    "SocketIO": {"dependencies": ("socket.io",)},
    "Pusher": {"dependencies": ("@pusher/push-notifications-web",)},
    "Ably": {"dependencies": ("ably",)},
    "PubNub": {"dependencies": ("pubnub",)},
    # DevOps / hosting
    "Docker": {"keywords": ("docker", "dockerfile", "docker-compose")},
    "Vercel": {"keywords": ("vercel",)},
    "Netlify": {"keywords": ("netlify",)},
    "Heroku": {"keywords": ("heroku",)},
    "Railway": {"keywords": ("railway",)},
    "AWS": {"keywords": ("aws-sdk",)},
    "GCP": {"keywords": ("@google-cloud",)},
    "Azure": {"keywords": ("@azure",)},
    # Mobile & hybrid
    "ReactNative": {"dependencies": ("react-native",)},
    "Expo": {"dependencies": ("expo",)},
    "Capacitor": {"dependencies": ("@capacitor/core",)},
    "Ionic": {"dependencies": ("@ionic/react",)},
    "Flutter": {"keywords": ("flutter",)},
    "NativeScript": {"keywords": ("nativescript",)},
    # AI / ML
    "TensorFlow": {"keywords": ("tensorflow",)},
    "PyTorch": {"keywords": ("torch",)},
    "ScikitLearn": {"keywords": ("sklearn",)},
    "Pandas": {"keywords": ("pandas",)},
    "NumPy": {"keywords": ("numpy",)},
    "OpenCV": {"keywords": ("cv2", "opencv")},
    "LangChain": {"dependencies": ("langchain",)},
    "Transformers": {"dependencies": ("@huggingface/transformers",)},
    "OpenAI": {"dependencies": ("openai",)},
}
