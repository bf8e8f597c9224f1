"""
HanReader 命令行工具
"""

import argparse
import sys


def _engine(args):
    from hanreader import create_engine, EngineConfig
    config = EngineConfig.from_env()
    if args.dict:
        config.dict_path = args.dict
    return create_engine(config)


def main(argv=None):
    """命令行入口"""
    parser = argparse.ArgumentParser(
        prog="hanreader",
        description="HanReader - 中文文本分词与注音引擎",
    )
    parser.add_argument("-d", "--dict", default=None, help="词典文件 (JSON 或 CC-CEDICT 文本)")

    subparsers = parser.add_subparsers(dest="command", help="可用命令")

    # server 命令
    server_parser = subparsers.add_parser("server", help="启动 API 服务")
    server_parser.add_argument("--host", default="127.0.0.1", help="绑定地址 (默认: 127.0.0.1)")
    server_parser.add_argument("--port", type=int, default=3000, help="端口 (默认: 3000)")

    # segment 命令
    segment_parser = subparsers.add_parser("segment", help="分词")
    segment_parser.add_argument("text", help="中文文本")
    segment_parser.add_argument("-u", "--unique", action="store_true", help="去重输出")

    # annotate 命令
    annotate_parser = subparsers.add_parser("annotate", help="分词并注音")
    annotate_parser.add_argument("text", help="中文文本")

    # lookup 命令
    lookup_parser = subparsers.add_parser("lookup", help="查询词条")
    lookup_parser.add_argument("word", help="词语")

    # radicals 命令
    radicals_parser = subparsers.add_parser("radicals", help="单字部件拆分")
    radicals_parser.add_argument("character", help="单个汉字")
    radicals_parser.add_argument("-l", "--level", type=int, choices=(1, 2, 3), default=1, help="拆分层级")

    # version 命令
    subparsers.add_parser("version", help="显示版本")

    args = parser.parse_args(argv)

    if args.command == "server":
        from hanreader.api.server import main as server_main
        import os
        os.environ["HOST"] = args.host
        os.environ["PORT"] = str(args.port)
        if args.dict:
            os.environ["HANREADER_DICT_PATH"] = args.dict
        server_main()

    elif args.command == "segment":
        engine = _engine(args)
        tokens = engine.segment(args.text) if args.unique else engine.segment_sequence(args.text)
        print(" / ".join(tokens))

    elif args.command == "annotate":
        engine = _engine(args)
        for w in engine.annotate_with_positions(args.text).words:
            print(f"[{w.start_index}:{w.end_index}] {w.word}\t{w.pinyin}\t{w.english or '-'}")

    elif args.command == "lookup":
        engine = _engine(args)
        entries = engine.lookup(args.word)
        if not entries:
            print(f"未找到: {args.word}")
            sys.exit(1)
        for i, e in enumerate(entries, 1):
            print(f"{i}. {e.simplified} ({e.traditional}) [{e.pinyin}] {'; '.join(e.english)}")

    elif args.command == "radicals":
        engine = _engine(args)
        result = engine.decompose_radicals(args.character, args.level)
        if result is None:
            print(f"无可用拆分: {args.character}")
            sys.exit(1)
        for c in result.components:
            print(f"{c.radical}\t{c.pinyin or '-'}\t{c.meaning or '-'}")

    elif args.command == "version":
        from hanreader import __version__
        print(f"HanReader v{__version__}")

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
