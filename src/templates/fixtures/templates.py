BUILTIN_TEMPLATES = [
    {
        "id": "axios-client",
        "name": "Axios API Client",
        "type": "api-client",
        "framework": "axios",
        "description": "Typed API client built on an axios instance",
        "content": (
            "import axios, { AxiosInstance, AxiosRequestConfig } from 'axios';\n"
            "{{#each imports}}\n"
            "import { {{this}} } from './types';\n"
            "{{/each}}\n\n"
            "export class {{clientName}} {\n"
            "  private http: AxiosInstance;\n\n"
            "  constructor(baseURL: string = '{{baseUrl}}', config: AxiosRequestConfig = {}) {\n"
            "    this.http = axios.create({ baseURL, ...config });\n"
            "  }\n"
            "{{#each operations}}\n\n"
            "  async {{name}}({{params}}): Promise<{{responseType}}> {\n"
            "    const res = await this.http.{{method}}<{{responseType}}>(`{{path}}`{{#if body}}, body{{/if}});\n"
            "    return res.data;\n"
            "  }\n"
            "{{/each}}\n"
            "}\n"
        ),
    },
    {
        "id": "fetch-client",
        "name": "Fetch API Client",
        "type": "api-client",
        "framework": "fetch",
        "description": "Dependency-free API client using the Fetch API",
        "content": (
            "export class {{clientName}} {\n"
            "  constructor(private baseUrl: string = '{{baseUrl}}') {}\n\n"
            "  private async request<T>(method: string, path: string, body?: unknown): Promise<T> {\n"
            "    const res = await fetch(`${this.baseUrl}${path}`, {\n"
            "      method,\n"
            "      headers: { 'Content-Type': 'application/json' },\n"
            "      body: body === undefined ? undefined : JSON.stringify(body),\n"
            "    });\n"
            "    if (!res.ok) {\n"
            "      throw new Error(`${method} ${path} failed: ${res.status}`);\n"
            "    }\n"
            "    return res.json() as Promise<T>;\n"
            "  }\n"
            "{{#each operations}}\n\n"
            "  {{name}}({{params}}): Promise<{{responseType}}> {\n"
            "    return this.request<{{responseType}}>('{{upper method}}', `{{path}}`{{#if body}}, body{{/if}});\n"
            "  }\n"
            "{{/each}}\n"
            "}\n"
        ),
    },
    {
        "id": "react-query-hooks",
        "name": "React Query Hooks",
        "type": "api-client",
        "framework": "react-query",
        "description": "useQuery / useMutation hooks wrapping a generated client",
        "content": (
            "import { useQuery, useMutation } from '@tanstack/react-query';\n"
            "import { client } from './client';\n"
            "{{#each operations}}\n\n"
            "{{#if isQuery}}\n"
            "export const use{{pascal name}} = ({{params}}) =>\n"
            "  useQuery({ queryKey: ['{{name}}', {{keyParams}}], queryFn: () => client.{{name}}({{args}}) });\n"
            "{{else}}\n"
            "export const use{{pascal name}} = () =>\n"
            "  useMutation({ mutationFn: ({{params}}) => client.{{name}}({{args}}) });\n"
            "{{/if}}\n"
            "{{/each}}\n"
        ),
    },
    {
        "id": "typescript-interfaces",
        "name": "TypeScript Interfaces",
        "type": "typescript-types",
        "description": "Interfaces generated from schema definitions",
        "content": (
            "{{#each schemas}}\n"
            "{{#if description}}/** {{description}} */\n{{/if}}"
            "export interface {{name}} {\n"
            "{{#each properties}}\n"
            "  {{name}}{{#unless required}}?{{/unless}}: {{type}};\n"
            "{{/each}}\n"
            "}\n\n"
            "{{/each}}\n"
        ),
    },
    {
        "id": "axios-config",
        "name": "Axios Instance Config",
        "type": "config-file",
        "framework": "axios",
        "description": "Shared axios instance with base URL and auth interceptor",
        "content": (
            "import axios from 'axios';\n\n"
            "export const http = axios.create({\n"
            "  baseURL: process.env.API_BASE_URL ?? '{{baseUrl}}',\n"
            "  timeout: {{timeout}},\n"
            "});\n\n"
            "http.interceptors.request.use((config) => {\n"
            "  const token = localStorage.getItem('{{tokenKey}}');\n"
            "  if (token) {\n"
            "    config.headers.Authorization = `Bearer ${token}`;\n"
            "  }\n"
            "  return config;\n"
            "});\n"
        ),
    },
]
