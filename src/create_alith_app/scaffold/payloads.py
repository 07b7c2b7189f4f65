"""
Payloads of the built-in ``default`` template.

The file contents are opaque to the scaffolder: only the placeholder tokens
declared on each entry are ever touched.
"""

from __future__ import annotations

from ..core.errors import TemplateError
from .descriptor import PROJECT_NAME, SECRET, SECRET_ENV_VAR, TemplateDescriptor, TemplateEntry

PACKAGE_JSON = {
    "name": PROJECT_NAME.token,
    "private": True,
    "version": "0.0.0",
    "type": "module",
    "scripts": {
        "dev": (
            'concurrently "npm run server" "npm run frontend" '
            '--names "SERVER,FRONTEND" --prefix-colors "yellow,cyan"'
        ),
        "frontend": "vite",
        "server": "node server.js",
        "build": "vite build",
        "preview": "vite preview",
    },
    "dependencies": {
        "alith": "latest",
        "cors": "^2.8.5",
        "dotenv": "^16.4.7",
        "express": "^4.21.1",
        "react": "^19.0.0",
        "react-dom": "^19.0.0",
    },
    "devDependencies": {
        "@eslint/js": "^9.15.0",
        "@types/react": "^19.0.1",
        "@types/react-dom": "^19.0.2",
        "@vitejs/plugin-react": "^4.3.4",
        "autoprefixer": "^10.4.20",
        "concurrently": "^9.1.0",
        "eslint": "^9.15.0",
        "eslint-plugin-react-hooks": "^5.0.0",
        "eslint-plugin-react-refresh": "^0.4.14",
        "globals": "^15.12.0",
        "postcss": "^8.5.0",
        "tailwindcss": "^3.4.15",
        "typescript": "~5.6.2",
        "vite": "^7.1.5",
    },
}

VITE_CONFIG = """\
import { defineConfig } from 'vite'
import react from '@vitejs/plugin-react'

export default defineConfig({
  plugins: [react()],
  server: {
    port: 5173,
  },
})
"""

TSCONFIG = """\
{
  "compilerOptions": {
    "target": "ES2020",
    "useDefineForClassFields": true,
    "lib": ["ES2020", "DOM", "DOM.Iterable"],
    "module": "ESNext",
    "skipLibCheck": true,
    "moduleResolution": "bundler",
    "allowImportingTsExtensions": true,
    "isolatedModules": true,
    "moduleDetection": "force",
    "noEmit": true,
    "jsx": "react-jsx",
    "strict": true,
    "noUnusedLocals": true,
    "noUnusedParameters": true,
    "noFallthroughCasesInSwitch": true
  },
  "include": ["src"]
}
"""

TAILWIND_CONFIG = """\
/** @type {import('tailwindcss').Config} */
export default {
  content: ["./index.html", "./src/**/*.{js,ts,jsx,tsx}"],
  theme: {
    extend: {},
  },
  plugins: [],
}
"""

POSTCSS_CONFIG = """\
export default {
  plugins: {
    tailwindcss: {},
    autoprefixer: {},
  },
}
"""

ENV_EXAMPLE = f"{SECRET_ENV_VAR}={SECRET.token}\n"

GITIGNORE = """\
node_modules/
dist/
*.log
.env
.DS_Store
"""

README = f"""\
# {PROJECT_NAME.token}

An AI chat app built with [Alith](https://github.com/0xLazAI/alith), React and Vite.

## Getting started

1. Copy `.env.example` to `.env` and set `{SECRET_ENV_VAR}`
   (get a free key at https://console.groq.com/keys).
2. `npm install`
3. `npm run dev`

## Scripts

- `npm run dev` - front end and back end together
- `npm run frontend` - Vite dev server only
- `npm run server` - Alith API server only
- `npm run build` - production build
"""

INDEX_HTML = f"""\
<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <link rel="icon" type="image/svg+xml" href="/vite.svg" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>{PROJECT_NAME.token}</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.tsx"></script>
  </body>
</html>
"""

SERVER_JS = f"""\
import {{ Agent }} from 'alith';
import express from 'express';
import cors from 'cors';
import dotenv from 'dotenv';

dotenv.config();

const app = express();
const port = 3001;

const agent = new Agent({{
  model: 'llama-3.3-70b-versatile',
  apiKey: process.env.{SECRET_ENV_VAR},
  baseUrl: 'https://api.groq.com/openai/v1',
}});

app.use(cors());
app.use(express.json());

app.post('/api/chat', async (req, res) => {{
  const {{ message }} = req.body;
  if (!message) {{
    return res.status(400).json({{ error: 'Message is required' }});
  }}
  try {{
    const response = await agent.prompt(message);
    res.json({{ response }});
  }} catch (error) {{
    console.error('Error getting AI response:', error);
    res.status(500).json({{ error: 'Failed to get AI response', details: error.message }});
  }}
}});

app.get('/health', (req, res) => {{
  res.json({{ status: 'ok', message: 'Alith AI server is running' }});
}});

app.listen(port, () => {{
  console.log(`Alith AI server running at http://localhost:${{port}}`);
}});
"""

MAIN_TSX = """\
import { StrictMode } from 'react'
import { createRoot } from 'react-dom/client'
import './index.css'
import App from './App.tsx'

createRoot(document.getElementById('root')!).render(
  <StrictMode>
    <App />
  </StrictMode>,
)
"""

APP_TSX = f"""\
import {{ useState }} from 'react'
import viteLogo from '/vite.svg'
import './App.css'
import ChatInterface from './components/ChatInterface'

function App() {{
  const [isChatOpen, setIsChatOpen] = useState(false)

  return (
    <>
      <img src={{viteLogo}} className="logo" alt="Vite logo" />
      <h1>{PROJECT_NAME.token}</h1>
      <p className="read-the-docs">
        Edit <code>src/App.tsx</code> to get started, or open the chat to talk to your Alith agent.
      </p>

      {{!isChatOpen && (
        <button
          onClick={{() => setIsChatOpen(true)}}
          className="fixed bottom-6 right-6 w-16 h-16 rounded-full shadow-2xl bg-white text-gray-700"
          aria-label="Open chat"
        >
          Chat
        </button>
      )}}

      <ChatInterface isOpen={{isChatOpen}} onClose={{() => setIsChatOpen(false)}} />
    </>
  )
}}

export default App
"""

INDEX_CSS = """\
@tailwind base;
@tailwind components;
@tailwind utilities;

:root {
  font-family: system-ui, Avenir, Helvetica, Arial, sans-serif;
  line-height: 1.5;
  color-scheme: light dark;
  color: rgba(255, 255, 255, 0.87);
  background-color: #242424;
}

body {
  margin: 0;
  display: flex;
  place-items: center;
  min-width: 320px;
  min-height: 100vh;
}

@media (prefers-color-scheme: light) {
  :root {
    color: #213547;
    background-color: #ffffff;
  }
}
"""

APP_CSS = """\
#root {
  max-width: 1280px;
  margin: 0 auto;
  padding: 2rem;
  text-align: center;
}

.logo {
  height: 6em;
  padding: 1.5em;
}

.read-the-docs {
  color: #888;
}
"""

CHAT_INTERFACE_TSX = """\
import { useEffect, useRef, useState } from 'react';

interface Message {
  id: number;
  text: string;
  sender: 'user' | 'bot';
}

interface ChatInterfaceProps {
  isOpen: boolean;
  onClose: () => void;
}

const API_URL = 'http://localhost:3001/api/chat';

async function getAlithResponse(message: string): Promise<string> {
  try {
    const response = await fetch(API_URL, {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ message }),
    });
    if (!response.ok) {
      throw new Error(`HTTP error! status: ${response.status}`);
    }
    const data = await response.json();
    return data.response;
  } catch (error) {
    console.error('Error calling Alith API:', error);
    return 'Sorry, I could not reach the Alith server. Is `npm run server` running?';
  }
}

export default function ChatInterface({ isOpen, onClose }: ChatInterfaceProps) {
  const [messages, setMessages] = useState<Message[]>([
    { id: 1, text: 'Hello! I am your Alith assistant. How can I help?', sender: 'bot' },
  ]);
  const [input, setInput] = useState('');
  const [isTyping, setIsTyping] = useState(false);
  const bottomRef = useRef<HTMLDivElement>(null);

  useEffect(() => {
    bottomRef.current?.scrollIntoView({ behavior: 'smooth' });
  }, [messages]);

  if (!isOpen) return null;

  const send = async () => {
    const text = input.trim();
    if (!text) return;
    setMessages((prev) => [...prev, { id: Date.now(), text, sender: 'user' }]);
    setInput('');
    setIsTyping(true);
    const reply = await getAlithResponse(text);
    setMessages((prev) => [...prev, { id: Date.now() + 1, text: reply, sender: 'bot' }]);
    setIsTyping(false);
  };

  return (
    <div className="fixed bottom-6 right-6 w-96 h-[32rem] bg-white text-gray-800 rounded-2xl shadow-2xl flex flex-col">
      <div className="flex items-center justify-between p-4 border-b">
        <h3 className="font-semibold">Alith Assistant</h3>
        <button onClick={onClose} aria-label="Close chat">&times;</button>
      </div>
      <div className="flex-1 overflow-y-auto p-4 space-y-3 text-left">
        {messages.map((m) => (
          <div key={m.id} className={m.sender === 'user' ? 'text-right' : 'text-left'}>
            <span className="inline-block px-3 py-2 rounded-xl bg-gray-100">{m.text}</span>
          </div>
        ))}
        {isTyping && <div className="text-gray-400">Thinking...</div>}
        <div ref={bottomRef} />
      </div>
      <div className="flex gap-2 p-4 border-t">
        <input
          className="flex-1 border rounded-lg px-3 py-2"
          value={input}
          onChange={(e) => setInput(e.target.value)}
          onKeyDown={(e) => e.key === 'Enter' && send()}
          placeholder="Type your message..."
        />
        <button onClick={send} disabled={!input.trim()}>
          Send
        </button>
      </div>
    </div>
  );
}
"""

# Vite starter logos
REACT_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" aria-hidden="true" role="img" class="iconify iconify--logos" width="35.93" height="32" preserveAspectRatio="xMidYMid meet" viewBox="0 0 256 228"><path fill="#00D8FF" d="M210.483 73.824a171.49 171.49 0 0 0-8.24-2.597c.465-1.9.893-3.777 1.273-5.621c6.238-30.281 2.16-54.676-11.769-62.708c-13.355-7.7-35.196.329-57.254 19.526a171.23 171.23 0 0 0-6.375 5.848a155.866 155.866 0 0 0-4.241-3.917C100.759 3.829 77.587-4.822 63.673 3.233C50.33 10.957 46.379 33.89 51.995 62.588a170.974 170.974 0 0 0 1.892 8.48c-3.28.932-6.445 1.924-9.474 2.98C17.309 83.498 0 98.307 0 113.668c0 15.865 18.582 31.778 46.812 41.427a145.52 145.52 0 0 0 6.921 2.165a167.467 167.467 0 0 0-2.01 9.138c-5.354 28.2-1.173 50.591 12.134 58.266c13.744 7.926 36.812-.22 59.273-19.855a145.567 145.567 0 0 0 5.342-4.923a168.064 168.064 0 0 0 6.92 6.314c21.758 18.722 43.246 26.282 56.54 18.586c13.731-7.949 18.194-32.003 12.4-61.268a145.016 145.016 0 0 0-1.535-6.842c1.62-.48 3.21-.974 4.76-1.488c29.348-9.723 48.443-25.443 48.443-41.52c0-15.417-17.868-30.326-45.517-39.844Zm-6.365 70.984c-1.4.463-2.836.91-4.3 1.345c-3.24-10.257-7.612-21.163-12.963-32.432c5.106-11 9.31-21.767 12.459-31.957c2.619.758 5.16 1.557 7.61 2.4c23.69 8.156 38.14 20.213 38.14 29.504c0 9.896-15.606 22.743-40.946 31.14Zm-10.514 20.834c2.562 12.94 2.927 24.64 1.23 33.787c-1.524 8.219-4.59 13.698-8.382 15.893c-8.067 4.67-25.32-1.4-43.927-17.412a156.726 156.726 0 0 1-6.437-5.87c7.214-7.889 14.423-17.06 21.459-27.246c12.376-1.098 24.068-2.894 34.671-5.345a134.17 134.17 0 0 1 1.386 6.193ZM87.276 214.515c-7.882 2.783-14.16 2.863-17.955.675c-8.075-4.657-11.432-22.636-6.853-46.752a156.923 156.923 0 0 1 1.869-8.499c10.486 2.32 22.093 3.988 34.498 4.994c7.084 9.967 14.501 19.128 21.976 27.15a134.668 134.668 0 0 1-4.877 4.492c-9.933 8.682-19.886 14.842-28.658 17.94ZM50.35 144.747c-12.483-4.267-22.792-9.812-29.858-15.863c-6.35-5.437-9.555-10.836-9.555-15.216c0-9.322 13.897-21.212 37.076-29.293c2.813-.98 5.757-1.905 8.812-2.773c3.204 10.42 7.406 21.315 12.477 32.332c-5.137 11.18-9.399 22.249-12.634 32.792a134.718 134.718 0 0 1-6.318-1.979Zm12.378-84.26c-4.811-24.587-1.616-43.134 6.425-47.789c8.564-4.958 27.502 2.111 47.463 19.835a144.318 144.318 0 0 1 3.841 3.545c-7.438 7.987-14.787 17.08-21.808 26.988c-12.04 1.116-23.565 2.908-34.161 5.309a160.342 160.342 0 0 1-1.76-7.887Zm110.427 27.268a347.8 347.8 0 0 0-7.785-12.803c8.168 1.033 15.994 2.404 23.343 4.08c-2.206 7.072-4.956 14.465-8.193 22.045a381.151 381.151 0 0 0-7.365-13.322Zm-45.032-43.861c5.044 5.465 10.096 11.566 15.065 18.186a322.04 322.04 0 0 0-30.257-.006c4.974-6.559 10.069-12.652 15.192-18.18ZM82.802 87.83a323.167 323.167 0 0 0-7.227 13.238c-3.184-7.553-5.909-14.98-8.134-22.152c7.304-1.634 15.093-2.97 23.209-3.984a321.524 321.524 0 0 0-7.848 12.897Zm8.081 65.352c-8.385-.936-16.291-2.203-23.593-3.793c2.26-7.3 5.045-14.885 8.298-22.6a321.187 321.187 0 0 0 7.257 13.246c2.594 4.48 5.28 8.868 8.038 13.147Zm37.542 31.03c-5.184-5.592-10.354-11.779-15.403-18.433c4.902.192 9.899.29 14.978.29c5.218 0 10.376-.117 15.453-.343c-4.985 6.774-10.018 12.97-15.028 18.486Zm52.198-57.817c3.422 7.8 6.306 15.345 8.596 22.52c-7.422 1.694-15.436 3.058-23.88 4.071a382.417 382.417 0 0 0 7.859-13.026a347.403 347.403 0 0 0 7.425-13.565Zm-16.898 8.101a358.557 358.557 0 0 1-12.281 19.815a329.4 329.4 0 0 1-23.444.823c-7.967 0-15.716-.248-23.178-.732a310.202 310.202 0 0 1-12.513-19.846h.001a307.41 307.41 0 0 1-10.923-20.627a310.278 310.278 0 0 1 10.89-20.637l-.001.001a307.318 307.318 0 0 1 12.413-19.761c7.613-.576 15.42-.876 23.31-.876H128c7.926 0 15.743.303 23.354.883a329.357 329.357 0 0 1 12.335 19.695a358.489 358.489 0 0 1 11.036 20.54a329.472 329.472 0 0 1-11 20.722Zm22.56-122.124c8.572 4.944 11.906 24.881 6.52 51.026c-.344 1.668-.73 3.367-1.15 5.09c-10.622-2.452-22.155-4.275-34.23-5.408c-7.034-10.017-14.323-19.124-21.64-27.008a160.789 160.789 0 0 1 5.888-5.4c18.9-16.447 36.564-22.941 44.612-18.3ZM128 90.808c12.625 0 22.86 10.235 22.86 22.86s-10.235 22.86-22.86 22.86s-22.86-10.235-22.86-22.86s10.235-22.86 22.86-22.86Z"></path></svg>'
)

VITE_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" aria-hidden="true" role="img" class="iconify iconify--logos" width="31.88" height="32" preserveAspectRatio="xMidYMid meet" viewBox="0 0 256 257"><defs><linearGradient id="IconifyId1813088fe1fbc01fb466" x1="-.828%" x2="57.636%" y1="7.652%" y2="78.411%"><stop offset="0%" stop-color="#41D1FF"></stop><stop offset="100%" stop-color="#BD34FE"></stop></linearGradient><linearGradient id="IconifyId1813088fe1fbc01fb467" x1="43.376%" x2="50.316%" y1="2.242%" y2="89.03%"><stop offset="0%" stop-color="#FFEA83"></stop><stop offset="8.333%" stop-color="#FFDD35"></stop><stop offset="100%" stop-color="#FFA800"></stop></linearGradient></defs><path fill="url(#IconifyId1813088fe1fbc01fb466)" d="M255.153 37.938L134.897 252.976c-2.483 4.44-8.862 4.466-11.382.048L.875 37.958c-2.746-4.814 1.371-10.646 6.827-9.67l120.385 21.517a6.537 6.537 0 0 0 2.322-.004l117.867-21.483c5.438-.991 9.574 4.796 6.877 9.62Z"></path><path fill="url(#IconifyId1813088fe1fbc01fb467)" d="M185.432.063L96.44 17.501a3.268 3.268 0 0 0-2.634 3.014l-5.474 92.456a3.268 3.268 0 0 0 3.997 3.378l24.777-5.718c2.318-.535 4.413 1.507 3.936 3.838l-7.361 36.047c-.495 2.426 1.782 4.5 4.151 3.78l15.304-4.649c2.372-.72 4.652 1.36 4.15 3.788l-11.698 56.621c-.732 3.542 3.979 5.473 5.943 2.437l1.313-2.028l72.516-144.72c1.215-2.423-.88-5.186-3.54-4.672l-25.505 4.922c-2.396.462-4.435-1.77-3.759-4.114l16.646-57.705c.677-2.35-1.37-4.583-3.769-4.113Z"></path></svg>'
)


DEFAULT_TEMPLATE = TemplateDescriptor.build(
    "default",
    [
        TemplateEntry.structured("package.json", PACKAGE_JSON, PROJECT_NAME.key),
        TemplateEntry.text("vite.config.ts", VITE_CONFIG),
        TemplateEntry.text("tsconfig.json", TSCONFIG),
        TemplateEntry.text("tailwind.config.js", TAILWIND_CONFIG),
        TemplateEntry.text("postcss.config.mjs", POSTCSS_CONFIG),
        # Example file keeps its token; the real secret goes to .env
        TemplateEntry.text(".env.example", ENV_EXAMPLE),
        TemplateEntry.text(".gitignore", GITIGNORE),
        TemplateEntry.text("README.md", README, PROJECT_NAME.key),
        TemplateEntry.text("index.html", INDEX_HTML, PROJECT_NAME.key),
        TemplateEntry.text("server.js", SERVER_JS),
        TemplateEntry.text("src/main.tsx", MAIN_TSX),
        TemplateEntry.text("src/App.tsx", APP_TSX, PROJECT_NAME.key),
        TemplateEntry.text("src/index.css", INDEX_CSS),
        TemplateEntry.text("src/App.css", APP_CSS),
        TemplateEntry.text("src/components/ChatInterface.tsx", CHAT_INTERFACE_TSX),
        TemplateEntry.text("src/assets/react.svg", REACT_SVG),
        TemplateEntry.text("public/vite.svg", VITE_SVG),
    ],
)

TEMPLATES: dict[str, TemplateDescriptor] = {DEFAULT_TEMPLATE.name: DEFAULT_TEMPLATE}


def get_template(name: str) -> TemplateDescriptor:
    """
    Look up a template variant by name.

    Raises:
        TemplateError: If no template is registered under that name
    """
    try:
        return TEMPLATES[name]
    except KeyError:
        available = ", ".join(sorted(TEMPLATES))
        raise TemplateError(f"Unknown template '{name}'. Available templates: {available}") from None
