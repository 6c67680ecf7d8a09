"""
AI insight panel
Inventory health summary and restock suggestions from an OpenAI compatible
chat completions API, called with httpx. Without a key the local rule
based analysis is used (AI_FALLBACK).
"""
import hashlib
import json
from typing import Dict, List, Optional

import httpx
from flask import current_app

from neonflow.extensions import cache


class InsightService:
    """Chat completions client for the insight panel"""

    CACHE_PREFIX = 'insight'

    def __init__(self):
        self._http_client = None

    def _get_http_client(self) -> httpx.Client:
        if self._http_client is None:
            self._http_client = httpx.Client()
        return self._http_client

    def _get_credentials(self):
        key = current_app.config.get('AI_API_KEY', '')
        base = current_app.config.get('AI_BASE_URL', 'https://api.deepseek.com')
        if not key or key == 'sk-placeholder' or len(key) < 10:
            return None, base
        return key, base

    def is_configured(self) -> bool:
        key, _ = self._get_credentials()
        return key is not None

    def _complete(self, prompt: str, timeout: float, json_mode: bool = False) -> str:
        """One chat completion; httpx errors propagate to the caller"""
        api_key, base_url = self._get_credentials()
        api_url = base_url.rstrip('/')
        if not api_url.endswith('/v1'):
            api_url += '/v1'

        body = {
            'model': current_app.config.get('AI_MODEL', 'deepseek-chat'),
            'messages': [{'role': 'user', 'content': prompt}],
            'temperature': 0.4,
            'stream': False,
        }
        if json_mode:
            body['response_format'] = {'type': 'json_object'}

        response = self._get_http_client().post(
            f"{api_url}/chat/completions",
            headers={'Authorization': f"Bearer {api_key}", 'Content-Type': 'application/json'},
            json=body,
            timeout=timeout,
        )
        response.raise_for_status()
        return response.json()['choices'][0]['message']['content'] or ''

    @staticmethod
    def _fingerprint(kind, items) -> str:
        raw = '|'.join(f"{i.id}:{i.quantity}:{i.price}:{i.status}" for i in items)
        return f"{InsightService.CACHE_PREFIX}:{kind}:{hashlib.sha1(raw.encode()).hexdigest()}"

    @staticmethod
    def critical_items(items) -> List:
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        return [i for i in items if i.quantity < threshold or i.status == 'Low Stock']

    # ---------------------------------------------------------------- health

    def analyze_inventory_health(self, items) -> str:
        """Markdown summary (max ~300 words) of risks, overstock and pricing"""
        if not items:
            return "Inventory is empty. Add items to get an AI analysis."

        key = self._fingerprint('health', items)
        cached = cache.get(key)
        if cached is not None:
            return cached

        if not self.is_configured():
            if not current_app.config.get('AI_FALLBACK', False):
                return "AI service is not configured. Set AI_API_KEY to enable insights."
            result = self._local_health_report(items)
        else:
            summary = '\n'.join(f"{i.name} ({i.quantity} units, ${i.price}, Status: {i.status})" for i in items)
            prompt = (
                "Analyze the following inventory data and give a concise strategic summary (max 300 words).\n"
                "Focus on:\n"
                "1. Revenue risks (low stock).\n"
                "2. Overstock problems.\n"
                "3. Pricing suggestions or anomalies.\n"
                "4. An overall health score (0-100).\n\n"
                f"Inventory Data:\n{summary}\n\n"
                "Format with clear Markdown headings."
            )
            try:
                result = self._complete(prompt, current_app.config.get('AI_ANALYSIS_TIMEOUT', 15))
                result = result or "No analysis was generated."
            except httpx.TimeoutException:
                current_app.logger.warning("AI health analysis timed out")
                return "Analysis timed out. The AI service took too long to respond."
            except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
                current_app.logger.error(f"AI health analysis failed: {e}")
                return f"Failed to generate AI insight: {e}"

        cache.set(key, result)
        return result

    def _local_health_report(self, items) -> str:
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        out_of_stock = [i for i in items if i.quantity <= 0]
        low = [i for i in items if 0 < i.quantity < threshold]
        over = sorted((i for i in items if i.quantity >= threshold * 10), key=lambda i: -i.quantity)
        total_value = sum(i.quantity * (i.price or 0) for i in items)
        score = max(0, 100 - round(100 * (len(out_of_stock) * 2 + len(low)) / (2 * len(items))))

        lines = ["## Inventory Health (local analysis)", "",
                 f"**Health score:** {score}/100", f"**Stock value:** ${total_value:,.2f}", ""]
        lines.append("### Revenue risks")
        if out_of_stock or low:
            lines += [f"- {i.name}: {i.quantity} units" for i in out_of_stock + low]
        else:
            lines.append("- No items below the low stock threshold.")
        lines += ["", "### Overstock"]
        lines += [f"- {i.name}: {i.quantity} units" for i in over[:5]] or ["- Nothing stands out."]
        return '\n'.join(lines)

    # --------------------------------------------------------------- restock

    def suggest_restock_plan(self, items) -> List[Dict[str, str]]:
        """[{'item': name, 'suggestion': text}] for critical items, [] on any failure"""
        critical = self.critical_items(items)
        if not critical:
            return []

        key = self._fingerprint('restock', critical)
        cached = cache.get(key)
        if cached is not None:
            return cached

        if not self.is_configured():
            if not current_app.config.get('AI_FALLBACK', False):
                return []
            plan = self._local_restock_plan(critical)
        else:
            prompt = (
                "Give a restock strategy for the following critical items.\n"
                'Return a JSON object {"plan": [...]} where each entry has "item" (name) '
                'and "suggestion" (short action plan).\n\n'
                f"Items:\n{json.dumps([{'name': i.name, 'quantity': i.quantity} for i in critical])}"
            )
            try:
                text = self._complete(prompt, current_app.config.get('AI_RESTOCK_TIMEOUT', 10), json_mode=True)
                plan = self._parse_plan(text)
            except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
                current_app.logger.error(f"AI restock plan failed: {e}")
                return []

        cache.set(key, plan)
        return plan

    @staticmethod
    def _parse_plan(text: Optional[str]) -> List[Dict[str, str]]:
        if not text:
            return []
        data = json.loads(text)
        if isinstance(data, dict):
            data = data.get('plan')
        if not isinstance(data, list):
            return []
        return [
            {'item': str(entry['item']), 'suggestion': str(entry['suggestion'])}
            for entry in data
            if isinstance(entry, dict) and 'item' in entry and 'suggestion' in entry
        ]

    @staticmethod
    def _local_restock_plan(critical) -> List[Dict[str, str]]:
        threshold = current_app.config.get('LOW_STOCK_THRESHOLD', 20)
        plan = []
        for i in critical:
            target = threshold * 2
            if i.quantity <= 0:
                text = f"Out of stock: reorder at least {target} units urgently."
            else:
                text = f"Only {i.quantity} left: reorder {max(target - i.quantity, 1)} units to reach {target}."
            plan.append({'item': i.name, 'suggestion': text})
        return plan


insight_service = InsightService()
