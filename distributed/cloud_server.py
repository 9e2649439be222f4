"""
PRIDE Cloud HTTP服务器
接收车辆的会话、承诺和聚合证明请求

Two surfaces share one CloudProvider:
- REST routes (/new_session, /commit, /sign, ...)
- /rpc: the legacy JSON-RPC envelope of the Go cars
  ({"method": "Cloud.Commit", "params": [{...}], "id": 1})
"""

import argparse
import logging
import sys

from flask import Flask, jsonify, request

from cloud_errors import ProtocolError, ValidationError
from cloud_provider import CloudProvider
from distributed.config import config
from distributed.logger_config import setup_logger
from distributed.serialization import serialize_session_summary

logger = logging.getLogger(__name__)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("request body must be a JSON object")
    return data


def _error_response(e: ProtocolError):
    return jsonify({'success': False, **e.to_dict()}), e.http_status


def _rpc_params(params) -> dict:
    # Go 的 net/rpc 编解码器要求 params 是只有一个对象的数组
    if isinstance(params, list):
        if not params:
            return {}
        if len(params) != 1:
            raise ValidationError("params must hold exactly one object")
        params = params[0]
    if params is None:
        return {}
    if not isinstance(params, dict):
        raise ValidationError("params must be an object")
    return params


def create_app(provider: CloudProvider = None) -> Flask:
    """创建Flask应用；provider 默认为新的内存 CloudProvider"""
    app = Flask(__name__)
    provider = provider if provider is not None else CloudProvider()
    app.config['CLOUD_PROVIDER'] = provider

    rpc_methods = {
        'Cloud.Time': lambda p: {'Timestamp': provider.time()},
        'Cloud.NewSession': lambda p: provider.new_session(p.get('CarID')) or {},
        'Cloud.Commit': lambda p: provider.commit(
            p.get('CarID'), p.get('Timestamp'), p.get('TildeV'), p.get('TildeA')) or {},
        'Cloud.Sign': lambda p: {'Signature': provider.sign(
            p.get('CarID'), p.get('PiV'), p.get('PiA'))},
    }

    @app.route('/health', methods=['GET'])
    def health():
        """健康检查"""
        return jsonify({'status': 'ok', 'sessions': len(provider.store)})

    @app.route('/time', methods=['GET'])
    def current_time():
        """当前 unix 时间戳"""
        return jsonify({'success': True, 'timestamp': provider.time()})

    @app.route('/new_session', methods=['POST'])
    def new_session():
        """开启会话"""
        try:
            data = _json_body()
            provider.open_session(data.get('car_id'))
            return jsonify({'success': True})
        except ProtocolError as e:
            return _error_response(e)

    @app.route('/commit', methods=['POST'])
    def commit():
        """提交承诺 (Ṽ, Ã)"""
        try:
            data = _json_body()
            provider.commit(data.get('car_id'), data.get('timestamp'),
                            data.get('tilde_v'), data.get('tilde_a'))
            return jsonify({'success': True})
        except ProtocolError as e:
            return _error_response(e)

    @app.route('/sign', methods=['POST'])
    def sign():
        """验证聚合值 (Pi_V, Pi_A)"""
        try:
            data = _json_body()
            signature = provider.sign(data.get('car_id'), data.get('pi_v'), data.get('pi_a'))
            return jsonify({'success': True, 'signature': signature})
        except ProtocolError as e:
            return _error_response(e)

    @app.route('/session/<int:car_id>', methods=['GET'])
    def session_summary(car_id):
        """会话摘要"""
        try:
            session = provider.store.get(car_id)
            return jsonify({'success': True, **serialize_session_summary(session)})
        except ProtocolError as e:
            return _error_response(e)

    @app.route('/rpc', methods=['POST'])
    def rpc():
        """JSON-RPC 接口：返回 {"id", "result", "error"}"""
        data = request.get_json(silent=True)
        request_id = data.get('id') if isinstance(data, dict) else None
        try:
            if not isinstance(data, dict):
                raise ValidationError("request body must be a JSON object")
            method = data.get('method')
            handler = rpc_methods.get(method) if isinstance(method, str) else None
            if handler is None:
                raise ValidationError(f"rpc: can't find method {method}")
            result = handler(_rpc_params(data.get('params')))
            return jsonify({'id': request_id, 'result': result, 'error': None})
        except ProtocolError as e:
            return jsonify({'id': request_id, 'result': None, 'error': e.message,
                            'code': e.code})

    return app


def main(argv=None):
    """启动Cloud服务器"""
    parser = argparse.ArgumentParser(description="PRIDE cloud aggregation server")
    parser.add_argument('--host', default=config.cloud_host)
    parser.add_argument('--port', type=int, default=config.cloud_port,
                        help="TCP port, 1-65535")
    args = parser.parse_args(argv)

    if not config.valid_port(args.port):
        parser.print_usage(sys.stderr)
        parser.exit(2, f"invalid port: {args.port}\n")

    setup_logger(config.log_level, config.log_file)
    app = create_app()
    logger.info("Listening on %s:%d...", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=False, threaded=True)


if __name__ == '__main__':
    main()
